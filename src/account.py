from decimal import Decimal

from errors import (
    AccountLocked,
    InsufficientFunds,
    IntegrityError,
    InvalidState,
    TransactionNotFound,
    TransactionStoreError,
)
from models import (
    Amount,
    ClientId,
    Deposit,
    DepositRecord,
    Dispute,
    DisputeState,
    Tx,
    TxRecord,
    Withdraw,
    WithdrawRecord,
)
from stores import TransactionStore


class Account:
    """
    One client's funds. State is only changed through process().
    balance (available funds) is derived as total - held.
    """

    def __init__(self, client_id: ClientId):
        self._client_id = client_id
        self._total = Decimal("0")
        self._held = Decimal("0")
        self._locked = False

    @property
    def client_id(self) -> ClientId:
        return self._client_id

    @property
    def balance(self) -> Amount:
        return self._total - self._held

    @property
    def total(self) -> Amount:
        return self._total

    @property
    def held(self) -> Amount:
        return self._held

    @property
    def locked(self) -> bool:
        return self._locked

    def __repr__(self) -> str:
        return (
            f"Account(client={self._client_id}, total={self._total}, "
            f"held={self._held}, locked={self._locked})"
        )

    def process(self, tx: Tx, store: TransactionStore) -> None:
        """
        Apply a single transaction to this account.

        Raises a TxError subclass and leaves the account untouched on failure.
        A locked account rejects everything with AccountLocked.
        """
        if self._locked:
            raise AccountLocked(self._client_id)

        try:
            match tx.operation:
                case Deposit(amount=amount):
                    self._deposit(tx, amount, store)
                case Withdraw(amount=amount):
                    self._withdraw(tx, amount, store)
                case Dispute(state=state):
                    self._dispute(tx, state, store)
                case _:
                    raise TypeError(f"unknown operation: {tx.operation!r}")
        except TransactionStoreError as e:
            raise IntegrityError(e) from e

    def _deposit(self, tx: Tx, amount: Amount, store: TransactionStore) -> None:
        store.add(tx.transaction_id, TxRecord(origin=DepositRecord(amount), client_id=self._client_id))
        self._total += amount

    def _withdraw(self, tx: Tx, amount: Amount, store: TransactionStore) -> None:
        if amount > self.balance:
            raise InsufficientFunds(tx.transaction_id)
        store.add(tx.transaction_id, TxRecord(origin=WithdrawRecord(amount), client_id=self._client_id))
        self._total -= amount

    def _dispute(self, tx: Tx, state: DisputeState, store: TransactionStore) -> None:
        record = store.get_tx_mut(self._client_id, tx.transaction_id)
        if record is None:
            raise TransactionNotFound(tx.transaction_id)

        match state:
            case DisputeState.INITIATED:
                if record.dispute is not None:
                    raise InvalidState(state, record.dispute)
                # balance goes negative if the funds were already withdrawn
                self._held += record.amount
            case DisputeState.RESOLVED:
                if record.dispute is not DisputeState.INITIATED:
                    raise InvalidState(state, record.dispute)
                held = self._held - record.amount
                assert held >= 0
                self._held = held
            case DisputeState.CHARGEBACK:
                if record.dispute is not DisputeState.INITIATED:
                    raise InvalidState(state, record.dispute)
                # total is allowed to go below zero here, the account is locked afterwards
                self._held -= record.amount
                self._total -= record.amount
                self._locked = True

        record.dispute = state
