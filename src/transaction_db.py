from typing import Iterator, Optional

from account import Account
from models import Tx
from stores import AccountStore, InMemoryAccountStore, InMemoryTransactionStore, TransactionStore


class TransactionDB:
    """
    Owns the accounts and the transaction history.
    add() is the only way to change either of them.
    """

    def __init__(
        self,
        transaction_store: Optional[TransactionStore] = None,
        account_store: Optional[AccountStore] = None,
    ):
        self._transactions = transaction_store if transaction_store is not None else InMemoryTransactionStore()
        self._accounts = account_store if account_store is not None else InMemoryAccountStore()

    @property
    def transactions(self) -> TransactionStore:
        return self._transactions

    @property
    def account_store(self) -> AccountStore:
        return self._accounts

    def add(self, tx: Tx) -> None:
        """Route tx to its client's account, opening the account on first sight."""
        account = self._accounts.get_account_mut(tx.client_id)
        if account is None:
            account = self._accounts.add_account(tx.client_id, Account(tx.client_id))

        account.process(tx, self._transactions)

    def accounts(self) -> Iterator[Account]:
        return self._accounts.accounts()
