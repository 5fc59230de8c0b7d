"""CLI entry point for the grid simulator.

Usage:
    spotgrid-sim --config conf/simulator.yaml
    spotgrid-sim --config conf/simulator.yaml --prices data/btc.csv --show-grid
    spotgrid-sim --config conf/simulator.yaml --export output/
"""

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from spotgrid import InvalidConfigError, build_grid_levels

from simulator.config import load_config
from simulator.data_provider import CsvPriceProvider
from simulator.reporter import SimulationReporter, print_grid_levels
from simulator.runner import SimulationRunner


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s %(name)s %(levelname)s: %(message)s"
    logging.basicConfig(level=level, format=format_str)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay a recorded price series through a spot grid strategy",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: conf/simulator.yaml)",
    )

    parser.add_argument(
        "--prices",
        type=str,
        default=None,
        help="CSV price file (overrides feed.prices_path in config)",
    )

    parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Directory to export trades, equity curve and metrics CSV files",
    )

    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Print grid levels before running",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)

        prices_path = args.prices or config.feed.prices_path
        if not prices_path:
            logger.error("No price feed given. Use --prices or set feed.prices_path")
            return 1

        runner = SimulationRunner(config.strategy)
        if args.show_grid:
            print_grid_levels(build_grid_levels(config.strategy.to_grid_config()))

        provider = CsvPriceProvider(
            prices_path,
            price_column=config.feed.price_column,
            timestamp_column=config.feed.timestamp_column,
        )
        logger.info("Replaying prices from %s", prices_path)
        session = runner.run(provider)

        print(session.get_summary())

        if args.export:
            reporter = SimulationReporter(session)
            paths = reporter.export_all(args.export)
            for kind, path in paths.items():
                logger.info("Exported %s to %s", kind, path)

        return 0

    except (FileNotFoundError, ValidationError, InvalidConfigError) as e:
        logger.error(f"Config error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Input error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Simulation failed: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
