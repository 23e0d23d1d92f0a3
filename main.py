import argparse
import logging
import sys
from typing import List, Optional

from sirsim import add_stderr_logger, remove_stderr_logger
from sirsim.config import Config, ConfigurationError, build_parser, config_from_args
from sirsim.simulation import SimulationDriver
from sirsim.sir import InvalidStateError
from sirsim.utils import format_report, log_results, plot_result


def run(args: argparse.Namespace, config: Config) -> int:
    driver = SimulationDriver(config.initial_state(), config.rates(), config.months)

    try:
        result = driver.run(
            on_report=lambda report: print(format_report(report, csv=args.csv)),
            workers=args.workers,
        )
    except InvalidStateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.log_dir:
        log_path = log_results(result, log_dir=args.log_dir)
        print(f"Log written to {log_path}", file=sys.stderr)

    if args.plot:
        plot_result(result, save_path=args.plot)
        print(f"Plot saved to {args.plot}", file=sys.stderr)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(parser.format_usage(), end="", file=sys.stderr)
        return 2

    if not args.verbose:
        return run(args, config)

    handler = add_stderr_logger(logging.DEBUG)
    try:
        return run(args, config)
    finally:
        remove_stderr_logger(handler)


if __name__ == "__main__":
    sys.exit(main())
