from dataclasses import replace
from typing import Dict, List

from models import ClientAccount


class AccountStore:
    """
    Client accounts keyed by client id.
    Accounts are created lazily on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zero-balance one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def snapshot(self) -> List[ClientAccount]:
        """Return copies of all accounts (for final output)."""
        return [replace(account) for account in self._accounts.values()]

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
