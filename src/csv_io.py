import csv
import logging
from decimal import Decimal, InvalidOperation, getcontext
from enum import Enum
from typing import Dict, Iterable, Optional, TextIO

from errors import (
    ConversionError,
    DepositWithoutAmount,
    DisputeWithAmount,
    LedgerError,
    NonPositiveAmount,
    WithdrawalWithoutAmount,
)
from models import (
    DISPLAY_PLACES,
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    AccountRecord,
    Amount,
    Deposit,
    Dispute,
    DisputeState,
    Tx,
    Withdraw,
)
from transaction_db import TransactionDB

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


DISPUTE_STATES = {
    TransactionType.DISPUTE: DisputeState.INITIATED,
    TransactionType.RESOLVE: DisputeState.RESOLVED,
    TransactionType.CHARGEBACK: DisputeState.CHARGEBACK,
}


class ProcessingStats:
    """Counters for a single input run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_skip(self):
        self.skipped += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Failed: {self.failed}, Skipped: {self.skipped}"


def _parse_id(value: str, maximum: int, name: str) -> int:
    if "_" in value:
        raise ValueError(f"invalid {name}: {value!r}")
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} out of range: {parsed}")
    return parsed


def _parse_amount(value: str) -> Optional[Amount]:
    if not value:
        return None
    if "_" in value:
        raise ValueError(f"invalid amount: {value!r}")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    # must still fit the context precision once shown with DISPLAY_PLACES digits
    if amount.adjusted() + DISPLAY_PLACES >= getcontext().prec:
        raise ValueError(f"amount too large: {value!r}")
    return amount


def parse_row(row: Dict[Optional[str], Optional[str]]) -> Tx:
    """
    Convert a CSV row keyed by header into a Tx.

    Raises ConversionError when the amount does not fit the transaction type,
    and KeyError or ValueError for missing or malformed fields.
    """
    # restkey None collects surplus fields, restval None fills missing ones
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if isinstance(k, str)}

    transaction_type = TransactionType(normalized["type"].lower())
    client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
    transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")
    amount = _parse_amount(normalized.get("amount", ""))

    match transaction_type:
        case TransactionType.DEPOSIT | TransactionType.WITHDRAWAL:
            if amount is None:
                if transaction_type == TransactionType.DEPOSIT:
                    raise DepositWithoutAmount()
                raise WithdrawalWithoutAmount()
            if amount <= 0:
                raise NonPositiveAmount(amount)
            if transaction_type == TransactionType.DEPOSIT:
                operation = Deposit(amount)
            else:
                operation = Withdraw(amount)
        case _:
            if amount is not None:
                raise DisputeWithAmount()
            operation = Dispute(DISPUTE_STATES[transaction_type])

    return Tx(transaction_id=transaction_id, client_id=client_id, operation=operation)


def read_csv_data(stream: TextIO, db: TransactionDB) -> ProcessingStats:
    """
    Feed every row of stream into db in order.
    Bad rows and rejected transactions are logged and skipped.
    """
    stats = ProcessingStats()
    reader = csv.DictReader(stream)
    for row in reader:
        logger.debug(f"Row {reader.line_num}: {row}")
        try:
            tx = parse_row(row)
        except (KeyError, ValueError, ConversionError) as e:
            logger.warning(f"Can't create valid transaction from row {reader.line_num}: {e!r}")
            stats.record_skip()
            continue

        try:
            db.add(tx)
        except LedgerError as e:
            logger.warning(f"Can't process transaction {tx}, reason: {e}")
            stats.record_failure()
            continue

        stats.record_success()
    return stats


def format_decimal(value: Amount) -> str:
    """Format decimal without scientific notation."""
    return f"{value:f}"


def print_results(stream: TextIO, accounts: Iterable) -> None:
    """Write one CSV row per account, amounts rescaled to 4 decimal places."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in accounts:
        record = AccountRecord.from_account(account)
        writer.writerow([
            record.client_id,
            format_decimal(record.balance),
            format_decimal(record.held),
            format_decimal(record.total),
            str(record.locked).lower(),
        ])
