import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from account import Account
from errors import ClientMismatch, TransactionAlreadyExists
from models import DepositRecord, DisputeState, TxRecord
from stores import InMemoryAccountStore, InMemoryTransactionStore


class TestInMemoryTransactionStore:
    def setup_method(self):
        self.store = InMemoryTransactionStore()

    def test_add_and_get(self):
        record = TxRecord(origin=DepositRecord(Decimal("10")), client_id=1)
        self.store.add(1, record)

        assert len(self.store) == 1
        assert self.store.get_tx_mut(1, 1) is record

    def test_duplicate_id_rejected(self):
        self.store.add(1, TxRecord(origin=DepositRecord(Decimal("10")), client_id=1))

        with pytest.raises(TransactionAlreadyExists) as exc:
            self.store.add(1, TxRecord(origin=DepositRecord(Decimal("20")), client_id=2))

        assert exc.value.transaction_id == 1
        assert self.store.get_tx_mut(1, 1).amount == Decimal("10")

    def test_unknown_id_returns_none(self):
        assert self.store.get_tx_mut(1, 42) is None

    def test_foreign_client_rejected(self):
        self.store.add(1, TxRecord(origin=DepositRecord(Decimal("10")), client_id=1))

        with pytest.raises(ClientMismatch) as exc:
            self.store.get_tx_mut(2, 1)

        assert exc.value.owner == 1
        assert exc.value.requester == 2

    def test_returned_record_is_mutable_in_place(self):
        self.store.add(5, TxRecord(origin=DepositRecord(Decimal("1")), client_id=1))
        self.store.get_tx_mut(1, 5).dispute = DisputeState.INITIATED

        assert self.store.get_tx_mut(1, 5).dispute == DisputeState.INITIATED


class TestInMemoryAccountStore:
    def setup_method(self):
        self.store = InMemoryAccountStore()

    def test_missing_account(self):
        assert self.store.get_account_mut(1) is None

    def test_add_first_write_wins(self):
        first = self.store.add_account(1, Account(1))
        second = self.store.add_account(1, Account(1))

        assert second is first
        assert len(self.store) == 1

    def test_accounts_iterates_all(self):
        for client_id in (3, 1, 2):
            self.store.add_account(client_id, Account(client_id))

        accounts = self.store.accounts()

        assert sorted(a.client_id for a in accounts) == [1, 2, 3]
        assert list(accounts) == []
