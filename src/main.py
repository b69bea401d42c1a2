import argparse
import csv
import logging
import sys
import time

from csv_io import print_results, read_csv_data
from transaction_db import TransactionDB

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="csvatm",
        description="Apply a CSV of client transactions and print the final account states.",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="enable debug logging")
    parser.add_argument("input", metavar="FILE", help="input CSV with columns type, client, tx, amount")
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug)

    start = time.perf_counter()
    db = TransactionDB()
    try:
        with open(args.input, "r", newline="", errors="replace") as f:
            stats = read_csv_data(f, db)
    except OSError as e:
        logger.error(f"Can't open file: {e}")
        return 1
    except csv.Error as e:
        logger.error(f"Malformed CSV input, stopping early: {e}")
        stats = None

    print_results(sys.stdout, db.accounts())
    logger.debug(f"{stats!r}" if stats else "No stats, input was cut short")
    logger.debug(f"Processed in {time.perf_counter() - start:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
