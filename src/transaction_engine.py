import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from account_store import AccountStore
from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    DisputeState,
    LedgerEntry,
    ProcessingResult,
    ProcessingStats,
    Resolve,
    Transaction,
    Withdrawal,
)
from transaction_ledger import TransactionLedger

logger = logging.getLogger(__name__)


class TransactionEngine:
    """
    Applies transactions, in the order given, to the accounts and ledger it owns.

    Transactions that cannot be applied (locked account, insufficient funds,
    unknown tx, wrong dispute state) are ignored rather than reported. Each
    handler returns a ProcessingResult which is tallied in ``stats``.
    """

    def __init__(self, accounts: Optional[AccountStore] = None, ledger: Optional[TransactionLedger] = None):
        self._accounts = accounts if accounts is not None else AccountStore()
        self._ledger = ledger if ledger is not None else TransactionLedger()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> None:
        """Apply a single transaction."""
        result = self._dispatch(transaction)
        self._stats.record(result)

        if result == ProcessingResult.IGNORED:
            logger.debug(f"Ignored {transaction.transaction_type.value} tx {transaction.tx_id} for client {transaction.client_id}")

    def snapshot(self) -> List[ClientAccount]:
        return self._accounts.snapshot()

    def _dispatch(self, transaction: Transaction) -> ProcessingResult:
        match transaction:
            case Deposit(client_id=client_id, tx_id=tx_id, amount=amount):
                return self._handle_deposit(client_id, tx_id, amount)
            case Withdrawal(client_id=client_id, amount=amount):
                return self._handle_withdrawal(client_id, amount)
            case Dispute(tx_id=tx_id):
                return self._handle_dispute(tx_id)
            case Resolve(tx_id=tx_id):
                return self._handle_resolve(tx_id)
            case Chargeback(tx_id=tx_id):
                return self._handle_chargeback(tx_id)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

    def _handle_deposit(self, client_id: int, tx_id: int, amount: Decimal) -> ProcessingResult:
        account = self._accounts.get_or_create(client_id)

        if account.locked:
            return ProcessingResult.IGNORED

        account.credit(amount)
        self._ledger.record(tx_id, LedgerEntry(client_id=client_id, tx_id=tx_id, amount=amount))
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, client_id: int, amount: Decimal) -> ProcessingResult:
        account = self._accounts.get_or_create(client_id)

        if account.locked:
            return ProcessingResult.IGNORED

        if account.available >= amount:
            account.debit(amount)
            return ProcessingResult.SUCCESS
        return ProcessingResult.IGNORED

    def _handle_dispute(self, tx_id: int) -> ProcessingResult:
        entry = self._ledger.lookup(tx_id)

        if entry is None or entry.state is not DisputeState.NONE:
            return ProcessingResult.IGNORED

        self._accounts.get_or_create(entry.client_id).hold(entry.amount)
        self._ledger.record(tx_id, replace(entry, state=DisputeState.DISPUTED))
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, tx_id: int) -> ProcessingResult:
        entry = self._ledger.lookup(tx_id)

        if entry is None or not entry.is_disputed:
            return ProcessingResult.IGNORED

        self._accounts.get_or_create(entry.client_id).release_hold(entry.amount)
        self._ledger.record(tx_id, replace(entry, state=DisputeState.NONE))
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, tx_id: int) -> ProcessingResult:
        entry = self._ledger.lookup(tx_id)

        if entry is None or not entry.is_disputed:
            return ProcessingResult.IGNORED

        account = self._accounts.get_or_create(entry.client_id)
        account.remove_held(entry.amount)
        account.lock()
        self._ledger.record(tx_id, replace(entry, state=DisputeState.NONE))
        return ProcessingResult.SUCCESS
