"""FoliationConfig і YAML."""
import numpy as np
import pytest

from cdt3d.config import FoliationConfig, load_config, save_config
from cdt3d.errors import FoliationConfigError


def test_simplices_per_timeslice():
    assert FoliationConfig(simplices=64000, timeslices=64).simplices_per_timeslice == 1000
    assert FoliationConfig(simplices=2, timeslices=4).simplices_per_timeslice == 0


def test_too_few_simplices_per_timeslice():
    with pytest.raises(FoliationConfigError, match="simplices per timeslice"):
        FoliationConfig(simplices=2, timeslices=4).validate()


@pytest.mark.parametrize("simplices, timeslices", [(0, 1), (10, 0), (-5, 2), (True, 1), (2.5, 1)])
def test_non_positive_integers_rejected(simplices, timeslices):
    with pytest.raises(FoliationConfigError):
        FoliationConfig(simplices=simplices, timeslices=timeslices).validate()


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        FoliationConfig(simplices=1, timeslices=2).validate()


def test_negative_max_passes_rejected():
    with pytest.raises(FoliationConfigError):
        FoliationConfig(simplices=8, timeslices=2, max_passes=-1).validate()


def test_load_yaml(tmp_path):
    path = tmp_path / "foliation.yaml"
    path.write_text("simplices: 6400\ntimeslices: 16\nseed: 42\noutput: true\n", encoding="utf-8")
    config = load_config(path)
    assert config == FoliationConfig(simplices=6400, timeslices=16, seed=42, output=True)
    assert config.max_passes == 20
    assert config.qhull_options == "QJ"


def test_unknown_key(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("simplices: 10\ntimeslices: 2\nradius: 3\n", encoding="utf-8")
    with pytest.raises(FoliationConfigError, match="radius"):
        load_config(path)


def test_missing_key():
    with pytest.raises(FoliationConfigError):
        FoliationConfig.from_dict({"simplices": 10})


def test_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(FoliationConfigError):
        load_config(path)


def test_save_and_load(tmp_path):
    config = FoliationConfig(simplices=800, timeslices=4, max_passes=5, seed=1, with_edges=False)
    save_config(config, tmp_path / "out.yaml")
    assert load_config(tmp_path / "out.yaml") == config


def test_numpy_integers_accepted():
    config = FoliationConfig(simplices=np.int64(800), timeslices=np.int32(4), max_passes=np.int64(3))
    assert config.validate() is config
    assert config.simplices_per_timeslice == 200
    with pytest.raises(FoliationConfigError):
        FoliationConfig(simplices=np.int64(0), timeslices=4).validate()
    with pytest.raises(FoliationConfigError):
        FoliationConfig(simplices=True, timeslices=1).validate()
