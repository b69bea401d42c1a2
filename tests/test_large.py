import sys
import os
import io
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from csv_io import read_csv_data
from transaction_db import TransactionDB


class TestTransactionDBLargeScale:
    def test_1000_accounts_6000_transactions(self):
        """Test with 1000 accounts and 6000 transactions."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Each client gets: 3 deposits (100, 200, 300) and 2 withdrawals (50, 100)
        # Expected per client: 100 + 200 + 300 - 50 - 100 = 450, plus 50 more below = 500

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 100")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 200")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 300")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 50")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 100")
            tx_id += 1

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        expected_balance = Decimal("500")

        db = TransactionDB()
        stats = read_csv_data(io.StringIO('\n'.join(rows)), db)
        accounts = {a.client_id: a for a in db.accounts()}

        assert len(accounts) == num_clients
        assert stats.processed == 6000
        assert len(db.transactions) == 6000

        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].balance == expected_balance, \
                f"Client {client_id}: expected {expected_balance}, got {accounts[client_id].balance}"

    def test_disputes_across_many_clients(self):
        """Every client disputes its first deposit, odd clients resolve, even clients charge back."""
        num_clients = 200
        rows = ["type, client, tx, amount"]

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {client_id * 10}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 10 + 1}, 25.5")
        for client_id in range(1, num_clients + 1):
            rows.append(f"dispute, {client_id}, {client_id * 10},")
        for client_id in range(1, num_clients + 1):
            action = "resolve" if client_id % 2 else "chargeback"
            rows.append(f"{action}, {client_id}, {client_id * 10},")

        db = TransactionDB()
        stats = read_csv_data(io.StringIO('\n'.join(rows)), db)

        assert stats.failed == 0
        for account in db.accounts():
            assert account.held == Decimal("0")
            if account.client_id % 2:
                assert account.total == Decimal("125.5")
                assert account.locked is False
            else:
                assert account.total == Decimal("25.5")
                assert account.locked is True
