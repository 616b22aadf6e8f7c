"""
Rotating API credential pool.

Provider keys are interchangeable; when one is rate limited the pool
moves on to the next. Rotation is driven by a single monotonic counter
so concurrent callers that hit the same exhausted key advance the pool
once, not once each.
"""

import logging
from typing import Iterable, Tuple

logger = logging.getLogger(__name__)


class CredentialPool:
    """
    Ordered, read-only list of credentials plus a rotation counter.

    The current index is ``counter % len(keys)`` and therefore always
    lies within the pool. Callers take a ``(key, ticket)`` pair from
    ``current()`` and hand the ticket back to ``rotate()`` when the key
    is rate limited; a stale ticket means somebody already rotated past
    that key and the call is a no-op.
    """

    def __init__(self, keys: Iterable[str], name: str = "provider"):
        self.name = name
        self._keys: Tuple[str, ...] = tuple(keys)
        self._counter = 0

        if not self._keys:
            logger.warning(f"No API keys configured for {name}; lookups will be reported as unverifiable")

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def index(self) -> int:
        if not self._keys:
            return 0
        return self._counter % len(self._keys)

    def current(self) -> Tuple[str, int]:
        """
        Get the active credential.

        Returns:
            Tuple of (key, ticket) where ticket identifies this rotation state

        Raises:
            LookupError: If the pool is empty
        """
        if not self._keys:
            raise LookupError(f"Credential pool for {self.name} is empty")
        return self._keys[self.index], self._counter

    def rotate(self, ticket: int) -> int:
        """
        Advance past the credential identified by ``ticket``.

        Args:
            ticket: Ticket returned by ``current()`` for the rate limited key

        Returns:
            The index now in use
        """
        if ticket == self._counter:
            self._counter += 1
            logger.info(f"Rotating to {self.name} key {self.index + 1} of {len(self._keys)}")
        return self.index
