"""
accounts.py - Account list and the "currently selected" pointer.

The list is fixed once loaded. Only selected_index ever changes, and it
only moves forward, wrapping at the end.
"""

import logging
from typing import Iterable, List, Tuple

from keyfob import base32
from keyfob.config import MAX_KEY_BYTES, load_account_entries

logger = logging.getLogger(__name__)


class RegistryEmptyError(ValueError):
    """An account registry needs at least one account."""


class Account:
    """One (label, Base32 secret) pair. The encoded secret is the source of truth."""

    __slots__ = ("_label", "_encoded_secret", "_key")

    def __init__(self, label: str, encoded_secret: str):
        self._label = label
        self._encoded_secret = encoded_secret
        self._key = None

    @property
    def label(self) -> str:
        return self._label

    @property
    def encoded_secret(self) -> str:
        return self._encoded_secret

    @property
    def key(self) -> bytes:
        """Raw key bytes, decoded on first use and cached."""
        if self._key is None:
            self._key, _ = base32.decode(self.encoded_secret, MAX_KEY_BYTES)
        return self._key

    def __repr__(self):
        # never print the secret
        return f"Account(label={self.label!r})"

    def __eq__(self, other):
        if not isinstance(other, Account):
            return NotImplemented
        return (self.label, self.encoded_secret) == (other.label, other.encoded_secret)

    def __hash__(self):
        return hash((self.label, self.encoded_secret))


class AccountRegistry:
    """
    Ordered, non-empty account list with a selection index.

    Raises:
        RegistryEmptyError: constructed with no accounts
    """

    def __init__(self, accounts: Iterable[Account], selected_index: int = 0):
        self._accounts = tuple(accounts)
        if not self._accounts:
            raise RegistryEmptyError("At least one account is required")
        self._selected_index = selected_index % len(self._accounts)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @selected_index.setter
    def selected_index(self, index: int):
        """
        Raises:
            IndexError: index outside [0, len)
        """
        if not 0 <= index < len(self._accounts):
            raise IndexError(f"Account index {index} out of range [0, {len(self._accounts)})")
        self._selected_index = index

    @classmethod
    def from_entries(cls, entries: Iterable[Tuple[str, str]], selected_index: int = 0):
        return cls((Account(label, secret) for label, secret in entries), selected_index)

    @classmethod
    def from_file(cls, path: str = None, selected_index: int = 0):
        return cls.from_entries(load_account_entries(path), selected_index)

    def __len__(self):
        return len(self._accounts)

    def __iter__(self):
        return iter(self._accounts)

    def __getitem__(self, index: int) -> Account:
        return self._accounts[index]

    @property
    def labels(self) -> List[str]:
        return [a.label for a in self._accounts]

    def current(self) -> Account:
        return self._accounts[self.selected_index]

    def advance(self) -> Account:
        self.selected_index = (self.selected_index + 1) % len(self._accounts)
        account = self._accounts[self.selected_index]
        logger.info("Selected account %d/%d: %s",
                    self.selected_index + 1, len(self._accounts), account.label)
        return account

    def find(self, name: str) -> int:
        """
        Index for a label (case-insensitive) or a 0-based index given as text.

        Raises:
            KeyError: no such account
        """
        if name.isdigit() and int(name) < len(self._accounts):
            return int(name)
        for i, account in enumerate(self._accounts):
            if account.label.lower() == name.lower():
                return i
        raise KeyError(name)
