"""
Trusted contact list used to skip scanning of known senders.
"""

import logging
from typing import Iterable, Iterator, Optional, Set

logger = logging.getLogger(__name__)


def normalize_address(sender: str) -> str:
    """Reduce ``Name <user@host>`` or ``user@host`` to a lower-case address."""
    sender = (sender or "").strip()
    if "<" in sender and ">" in sender:
        sender = sender[sender.index("<") + 1:sender.rindex(">")]
    return sender.strip().lower()


class TrustedContacts:
    """
    Case-insensitive set of sender addresses the user trusts.

    Only consulted when the user enables contact filtering; a trusted
    sender's email is then scored as fully safe without analysis.
    """

    def __init__(self, addresses: Optional[Iterable[str]] = None):
        self._addresses: Set[str] = set()
        for address in addresses or ():
            self.add(address)

    def add(self, address: str) -> bool:
        normalized = normalize_address(address)
        if not normalized:
            return False
        if normalized in self._addresses:
            return False
        self._addresses.add(normalized)
        logger.info(f"Added trusted contact: {normalized}")
        return True

    def remove(self, address: str) -> bool:
        normalized = normalize_address(address)
        if normalized not in self._addresses:
            return False
        self._addresses.discard(normalized)
        logger.info(f"Removed trusted contact: {normalized}")
        return True

    def is_trusted(self, sender: str) -> bool:
        normalized = normalize_address(sender)
        return bool(normalized) and normalized in self._addresses

    def __contains__(self, sender: str) -> bool:
        return self.is_trusted(sender)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._addresses))

    def __len__(self) -> int:
        return len(self._addresses)
