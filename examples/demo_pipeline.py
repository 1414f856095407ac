# examples/demo_pipeline.py
import argparse
import sys

from cdt3d import FoliationConfigError, setup_logging
from cdt3d.pipeline import make_foliated_triangulation

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Фоліована (2+1) тріангуляція з вкладених сфер")
    parser.add_argument("-s", "--simplices", type=int, default=6400)
    parser.add_argument("-t", "--timeslices", type=int, default=16)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else "INFO", format_style="simple")
    try:
        result = make_foliated_triangulation(args.simplices, args.timeslices, args.verbose)
    except FoliationConfigError as e:
        print(f"Помилка конфігурації: {e}", file=sys.stderr)
        sys.exit(2)

    for key, value in result.summary().items():
        print(f"{key:>20}: {value}")
