import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional

from models import (
    EXACT_CONTEXT,
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionType,
    Withdrawal,
)
from transaction_engine import TransactionEngine

logger = logging.getLogger(__name__)

# Limits the digits a single amount can add to a balance
MAX_AMOUNT = Decimal("1E+36")
MIN_AMOUNT_EXPONENT = -36


class PaymentsEngine:
    """
    Replays a CSV transaction log through a TransactionEngine, one row at a time
    in file order. Rows that cannot be decoded are logged and skipped.
    """

    def __init__(self, engine: Optional[TransactionEngine] = None):
        self._engine = engine if engine is not None else TransactionEngine()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        with open(filepath, "r", newline="") as f:
            for transaction in read_transactions(f):
                self._engine.apply(transaction)

        stats = self._engine.stats
        logger.info(f"Transactions: {stats.total}, Processed: {stats.processed}, Ignored: {stats.ignored}")

        return {account.client_id: account for account in self._engine.snapshot()}


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """Decode CSV lines into transactions, skipping rows that fail to parse."""
    reader = csv.DictReader(lines)
    for row in reader:
        transaction = parse_csv_row(row)
        if transaction is not None:
            yield transaction


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
    """
    Parse CSV row into a Transaction.

    Headers and values are whitespace-stripped and the type is case-insensitive.
    Deposits and withdrawals need a non-negative amount; any amount given on a
    dispute, resolve or chargeback is ignored. Returns None for rows that
    cannot be decoded.
    """
    try:
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = int(normalized["client"])
        tx_id = int(normalized["tx"])
        if client_id < 0 or tx_id < 0:
            raise ValueError(f"negative id in client={client_id}, tx={tx_id}")

        match transaction_type:
            case TransactionType.DEPOSIT:
                return Deposit(client_id, tx_id, _parse_amount(normalized))
            case TransactionType.WITHDRAWAL:
                return Withdrawal(client_id, tx_id, _parse_amount(normalized))
            case TransactionType.DISPUTE:
                return Dispute(client_id, tx_id)
            case TransactionType.RESOLVE:
                return Resolve(client_id, tx_id)
            case TransactionType.CHARGEBACK:
                return Chargeback(client_id, tx_id)
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def _parse_amount(normalized: Dict[str, str]) -> Decimal:
    amount_str = normalized.get("amount", "")
    if not amount_str:
        raise ValueError("missing amount")

    amount = Decimal(amount_str)
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"invalid amount {amount_str}")
    if amount >= MAX_AMOUNT or amount.normalize(EXACT_CONTEXT).as_tuple().exponent < MIN_AMOUNT_EXPONENT:
        raise ValueError(f"amount out of range {amount_str}")
    return amount
