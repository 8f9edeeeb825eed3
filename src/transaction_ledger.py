from typing import Dict, Optional

from models import LedgerEntry


class TransactionLedger:
    """Recorded deposits and their dispute state, kept for dispute lookups."""

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def record(self, tx_id: int, entry: LedgerEntry) -> None:
        """Store an entry, replacing any previous entry for the same tx id."""
        self._entries[tx_id] = entry

    def lookup(self, tx_id: int) -> Optional[LedgerEntry]:
        """Retrieve recorded entry by tx id, or None if it was never recorded."""
        return self._entries.get(tx_id)

    def __len__(self) -> int:
        return len(self._entries)
