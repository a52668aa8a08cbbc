import csv
import logging
from typing import Callable, Dict, Iterable, Iterator, Optional, TextIO

from client_profile import ClientProfile
from currency import Currency
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
REPORT_HEADER = ("client", "available", "held", "total", "locked")

MAX_CLIENT_ID = 0xFFFF
MAX_TX_ID = 0xFFFFFFFF


def read_transactions(
    stream: TextIO,
    on_skip: Optional[Callable[[Dict[str, str]], None]] = None,
) -> Iterator[Transaction]:
    """
    Lazily parse CSV rows into Transactions, one row at a time.
    The header is read and checked immediately, so a file that is not a
    transaction file fails here rather than on the first next().
    Malformed rows are logged and skipped; on_skip is called for each of them.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    if reader.fieldnames is None:
        raise ValueError("input has no header row")

    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
    missing = [name for name in REQUIRED_COLUMNS if name not in reader.fieldnames]
    if missing:
        raise ValueError(f"input header is missing columns: {', '.join(missing)}")

    return _iter_rows(reader, on_skip)


def _iter_rows(
    reader: csv.DictReader,
    on_skip: Optional[Callable[[Dict[str, str]], None]],
) -> Iterator[Transaction]:
    for row in reader:
        if not any((value or "").strip() for key, value in row.items() if key is not None):
            continue

        transaction = parse_row(row)
        if transaction is not None:
            yield transaction
        elif on_skip is not None:
            on_skip(row)


def parse_row(row: Dict[str, str]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        normalized = {k: (v or "").strip() for k, v in row.items() if k is not None}

        tx_type = TransactionType(normalized["type"].lower())
        client_id = int(normalized["client"])
        tx_id = int(normalized["tx"])

        if not 0 <= client_id <= MAX_CLIENT_ID:
            raise ValueError(f"client id {client_id} out of range")
        if not 0 <= tx_id <= MAX_TX_ID:
            raise ValueError(f"tx id {tx_id} out of range")

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = Currency.from_str(amount_str)

        return Transaction(
            tx_type=tx_type,
            client_id=client_id,
            tx_id=tx_id,
            amount=amount,
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def write_report(profiles: Iterable[ClientProfile], stream: TextIO) -> None:
    """Write one CSV line per client with 4-digit balances and a true/false lock flag."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for profile in profiles:
        writer.writerow(profile.as_row())
