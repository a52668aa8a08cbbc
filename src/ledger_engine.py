import csv
import sys
import logging

from csv_io import read_transactions, write_report
from exchange import Exchange

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)


def main(argv=None):
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python ledger_engine.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = argv[1]
    exchange = Exchange()
    read_error = None

    try:
        f = open(filepath, "r", encoding="utf-8", newline="")
    except OSError as e:
        print(f"Failed to read {filepath}: {e}", file=sys.stderr)
        sys.exit(1)

    with f:
        try:
            transactions = read_transactions(f, on_skip=lambda row: exchange.stats.record_skipped_row())
        except (csv.Error, ValueError) as e:
            print(f"Failed to read {filepath}: {e}", file=sys.stderr)
            sys.exit(1)

        # balances applied before a mid-file failure are still reported
        try:
            exchange.process(transactions)
        except (OSError, csv.Error, ValueError) as e:
            read_error = e

    if read_error is not None:
        print(f"Failed to read {filepath}: {read_error}", file=sys.stderr)

    write_report(exchange.profiles(), sys.stdout)
    print(exchange.stats.summary(), file=sys.stderr)

    if read_error is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()
