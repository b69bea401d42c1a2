from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional

from errors import ClientMismatch, TransactionAlreadyExists
from models import ClientId, TransactionId, TxRecord


class TransactionStore(ABC):
    """History of successful deposits and withdrawals, referenced by later disputes."""

    @abstractmethod
    def add(self, transaction_id: TransactionId, record: TxRecord) -> None:
        """Insert a new record. Raises TransactionAlreadyExists if the id is taken."""

    @abstractmethod
    def get_tx_mut(self, client_id: ClientId, transaction_id: TransactionId) -> Optional[TxRecord]:
        """
        Look up a record for mutation of its dispute state.

        Returns None if the id is unknown.
        Raises ClientMismatch if the record belongs to another client.
        """


class AccountStore(ABC):
    """Client accounts keyed by client id."""

    @abstractmethod
    def get_account_mut(self, client_id: ClientId) -> Optional["Account"]:
        """Return the account for client_id or None."""

    @abstractmethod
    def add_account(self, client_id: ClientId, account: "Account") -> "Account":
        """Insert account unless one exists, and return whichever is stored."""

    @abstractmethod
    def accounts(self) -> Iterator["Account"]:
        """Iterate over all stored accounts, in no particular order."""


class InMemoryTransactionStore(TransactionStore):
    def __init__(self):
        self._records: Dict[TransactionId, TxRecord] = {}

    def add(self, transaction_id: TransactionId, record: TxRecord) -> None:
        if transaction_id in self._records:
            raise TransactionAlreadyExists(transaction_id)
        self._records[transaction_id] = record

    def get_tx_mut(self, client_id: ClientId, transaction_id: TransactionId) -> Optional[TxRecord]:
        record = self._records.get(transaction_id)
        if record is None:
            return None
        # ids are global, so a foreign id must not touch this client's funds
        if record.client_id != client_id:
            raise ClientMismatch(record.client_id, client_id)
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, transaction_id: TransactionId) -> bool:
        return transaction_id in self._records


class InMemoryAccountStore(AccountStore):
    def __init__(self):
        self._accounts: Dict[ClientId, "Account"] = {}

    def get_account_mut(self, client_id: ClientId) -> Optional["Account"]:
        return self._accounts.get(client_id)

    def add_account(self, client_id: ClientId, account: "Account") -> "Account":
        return self._accounts.setdefault(client_id, account)

    def accounts(self) -> Iterator["Account"]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: ClientId) -> bool:
        return client_id in self._accounts
