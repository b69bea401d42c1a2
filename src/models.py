from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

ClientId = int
TransactionId = int
Amount = Decimal

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

DISPLAY_PLACES = 4


class DisputeState(Enum):
    """
    A dispute may be in one of three states.
    Valid transitions are None -> INITIATED, INITIATED -> RESOLVED and INITIATED -> CHARGEBACK.
    """

    INITIATED = "initiated"
    RESOLVED = "resolved"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Deposit:
    amount: Amount


@dataclass(frozen=True)
class Withdraw:
    amount: Amount


@dataclass(frozen=True)
class Dispute:
    state: DisputeState


TxOperation = Union[Deposit, Withdraw, Dispute]


@dataclass(frozen=True)
class Tx:
    """A single transaction to apply. transaction_id is unique across all clients."""

    transaction_id: TransactionId
    client_id: ClientId
    operation: TxOperation

    def __repr__(self) -> str:
        return f"Tx({self.operation}, client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True)
class DepositRecord:
    amount: Amount


@dataclass(frozen=True)
class WithdrawRecord:
    amount: Amount


TxRecordType = Union[DepositRecord, WithdrawRecord]


@dataclass
class TxRecord:
    """
    Stored result of a successful deposit or withdrawal.
    origin is fixed at creation, only dispute changes afterwards.
    """

    origin: TxRecordType
    client_id: ClientId
    dispute: Optional[DisputeState] = None

    @property
    def amount(self) -> Amount:
        return self.origin.amount


def rescale(amount: Amount, places: int = DISPLAY_PLACES) -> Amount:
    """
    Quantize amount to a fixed number of fractional digits for display.
    Values too large to carry that many digits are returned unchanged.
    """
    try:
        return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return amount


@dataclass(frozen=True)
class AccountRecord:
    """Final account snapshot as reported, amounts rescaled for display."""

    client_id: ClientId
    balance: Amount
    held: Amount
    total: Amount
    locked: bool

    @classmethod
    def from_account(cls, account) -> "AccountRecord":
        return cls(
            client_id=account.client_id,
            balance=rescale(account.balance),
            held=rescale(account.held),
            total=rescale(account.total),
            locked=account.locked,
        )
