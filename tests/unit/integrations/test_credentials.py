"""
Unit tests for the rotating credential pool.
"""

import pytest

from secure_inbox.integrations.credentials import CredentialPool


class TestCredentialPool:
    """Test suite for CredentialPool."""

    def test_starts_with_first_key(self):
        pool = CredentialPool(["k1", "k2", "k3"])

        key, ticket = pool.current()

        assert key == "k1"
        assert ticket == 0
        assert pool.index == 0

    def test_rotation_wraps_around(self):
        pool = CredentialPool(["k1", "k2"])

        for expected in ["k2", "k1", "k2"]:
            _, ticket = pool.current()
            pool.rotate(ticket)
            assert pool.current()[0] == expected

    def test_index_stays_in_range(self):
        pool = CredentialPool(["k1", "k2", "k3"])

        for _ in range(10):
            pool.rotate(pool.current()[1])
            assert 0 <= pool.index < len(pool)

    def test_stale_ticket_does_not_rotate(self):
        """Two callers rate limited on the same key advance the pool once."""
        pool = CredentialPool(["k1", "k2", "k3"])
        _, first_ticket = pool.current()
        _, second_ticket = pool.current()

        pool.rotate(first_ticket)
        pool.rotate(second_ticket)

        assert pool.current()[0] == "k2"

    def test_empty_pool(self):
        pool = CredentialPool([], name="virustotal")

        assert len(pool) == 0
        assert pool.index == 0
        with pytest.raises(LookupError):
            pool.current()
