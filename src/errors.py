from typing import Optional

from models import ClientId, DisputeState, TransactionId


class LedgerError(Exception):
    """Base for all recoverable ledger errors. Equal when type and arguments match."""

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class TransactionStoreError(LedgerError):
    pass


class ClientMismatch(TransactionStoreError):
    def __init__(self, owner: ClientId, requester: ClientId):
        super().__init__(owner, requester)
        self.owner = owner
        self.requester = requester

    def __str__(self) -> str:
        return f"client mismatch: {self.owner} != {self.requester}"


class TransactionAlreadyExists(TransactionStoreError):
    def __init__(self, transaction_id: TransactionId):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"transaction already exists ({self.transaction_id})"


class TxError(LedgerError):
    pass


class AccountLocked(TxError):
    def __init__(self, client_id: ClientId):
        super().__init__(client_id)
        self.client_id = client_id

    def __str__(self) -> str:
        return f"account locked: {self.client_id}"


class InsufficientFunds(TxError):
    def __init__(self, transaction_id: TransactionId):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"insufficient funds for tx {self.transaction_id}"


class TransactionNotFound(TxError):
    def __init__(self, transaction_id: TransactionId):
        super().__init__(transaction_id)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return f"transaction not found: {self.transaction_id}"


class InvalidState(TxError):
    def __init__(self, attempted: DisputeState, current: Optional[DisputeState]):
        super().__init__(attempted, current)
        self.attempted = attempted
        self.current = current

    def __str__(self) -> str:
        current = self.current.value if self.current else None
        return f"invalid dispute state: {self.attempted.value} from {current}"


class IntegrityError(TxError):
    """A store-level violation raised while processing a transaction."""

    def __init__(self, cause: TransactionStoreError):
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return str(self.cause)


class ConversionError(LedgerError):
    """An input row that cannot become a valid transaction."""


class DepositWithoutAmount(ConversionError):
    def __str__(self) -> str:
        return "deposit without amount"


class WithdrawalWithoutAmount(ConversionError):
    def __str__(self) -> str:
        return "withdrawal without amount"


class DisputeWithAmount(ConversionError):
    def __str__(self) -> str:
        return "dispute action should not contain amount"


class NonPositiveAmount(ConversionError):
    def __init__(self, amount):
        super().__init__(amount)
        self.amount = amount

    def __str__(self) -> str:
        return f"amount must be positive, got {self.amount}"
