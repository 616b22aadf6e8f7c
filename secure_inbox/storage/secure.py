"""
Encrypted file-backed statistics store.

Keeps the counters and history log in a single Fernet-encrypted JSON
document. History entries contain sender addresses and subjects, so the
document is never written in clear text.
"""

import asyncio
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List

from cryptography.fernet import Fernet, InvalidToken

from secure_inbox.storage.base import StatsStore

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the statistics document cannot be read or written."""


class SecureStatsStore(StatsStore):
    """
    Durable stats store with encryption at rest.

    Features:
    - Fernet symmetric encryption of the whole document
    - Every key in the key file is tried on read, most recent first
    - Atomic writes through a temporary file and ``os.replace``
    - File I/O runs in worker threads, guarded by a lock
    """

    def __init__(self, storage_path: str = "data/secure"):
        """
        Initialize the store, creating the directory and key file if needed.

        Args:
            storage_path: Directory holding the data and key files
        """
        self.storage_path = Path(storage_path)
        self.data_file = self.storage_path / "statistics.bin"
        self.keys_file = self.storage_path / "stats_keys.json"
        self._file_lock = threading.RLock()

        self.storage_path.mkdir(parents=True, exist_ok=True)

        self.keys = self._initialize_keys()
        self.current_key = self.keys[0]
        self.cipher_suite = Fernet(self.current_key)

        logger.info(f"Secure stats store ready at {self.data_file}")

    def _initialize_keys(self) -> List[bytes]:
        """
        Load the key history, generating a first key when none exists.

        Returns:
            List of encryption keys with most recent first
        """
        if self.keys_file.exists():
            try:
                with open(self.keys_file, 'r') as f:
                    keys_data = json.load(f)
                keys = [k.encode() for k in keys_data['keys']]
                if keys:
                    return keys
            except (OSError, ValueError, KeyError, TypeError) as e:
                raise StorageError(f"Unreadable key file {self.keys_file}: {e}") from e

        initial_key = Fernet.generate_key()
        self._save_keys([initial_key])
        return [initial_key]

    def _save_keys(self, keys: List[bytes]) -> None:
        temp_file = self.keys_file.with_suffix('.tmp')
        with open(temp_file, 'w') as f:
            json.dump({'keys': [k.decode() for k in keys]}, f)
        os.replace(temp_file, self.keys_file)

    def _read_document(self) -> Dict[str, Any]:
        with self._file_lock:
            if not self.data_file.exists():
                return {}

            with open(self.data_file, 'rb') as f:
                encrypted_data = f.read()
            if not encrypted_data:
                return {}

            for key in self.keys:
                try:
                    decrypted = Fernet(key).decrypt(encrypted_data)
                except InvalidToken:
                    continue
                try:
                    document = json.loads(decrypted)
                except ValueError as e:
                    raise StorageError(f"Corrupt statistics document: {e}") from e
                if not isinstance(document, dict):
                    raise StorageError("Statistics document is not an object")
                return document

            raise StorageError("Unable to decrypt statistics with any available key")

    def _write_document(self, document: Dict[str, Any]) -> None:
        temp_file = self.data_file.with_suffix('.tmp')
        with self._file_lock:
            encrypted_data = self.cipher_suite.encrypt(json.dumps(document).encode())
            with open(temp_file, 'wb') as f:
                f.write(encrypted_data)
            os.replace(temp_file, self.data_file)

    def _merge_and_write(self, values: Dict[str, Any]) -> None:
        with self._file_lock:
            document = self._read_document()
            document.update(values)
            self._write_document(document)

    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        document = await asyncio.to_thread(self._read_document)
        return {key: document[key] for key in keys if key in document}

    async def set(self, values: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._merge_and_write, dict(values))

