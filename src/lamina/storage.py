"""Pluggable key/value persistence for DocumentStore snapshots.

A snapshot is wrapped in a small envelope before it is written:

    {"state": <lamina.serialization.to_dict output>, "version": 1}

``version`` is the envelope format, independent of the records'
``format_version``. Loading an envelope of any other version fails rather
than guessing.

Thread Safety:
    MemoryStorage is not thread-safe. For shared use, wrap it with a lock
    or provide a StateStorage implementation with internal locking.

Example:
    >>> from lamina import DocumentModel
    >>> storage = MemoryStorage()
    >>> model = DocumentModel(seed_text="Hello world.")
    >>> save_store(model.store, storage)
    >>> load_store(storage).current_version_number == model.current_version_number
    True
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Protocol

from lamina.errors import LaminaError, StorageError
from lamina.serialization import from_dict, to_dict
from lamina.utils.logger import get_logger

if TYPE_CHECKING:
    from lamina.store import DocumentStore

logger = get_logger(__name__)

DEFAULT_STORE_NAME = "document-store"
ENVELOPE_VERSION = 1


class StateStorage(Protocol):
    """Protocol for string key/value backends (files, browser-like storage, KV stores)."""

    def get_item(self, name: str) -> str | None:
        """Return the stored string, or None if absent."""
        ...

    def set_item(self, name: str, value: str) -> None:
        """Store a string under ``name``, replacing any previous value."""
        ...

    def remove_item(self, name: str) -> None:
        """Remove ``name`` if present."""
        ...


class MemoryStorage:
    """In-memory StateStorage backed by a dict."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get_item(self, name: str) -> str | None:
        return self._data.get(name)

    def set_item(self, name: str, value: str) -> None:
        self._data[name] = value

    def remove_item(self, name: str) -> None:
        self._data.pop(name, None)


def save_store(
    store: DocumentStore,
    storage: StateStorage,
    name: str = DEFAULT_STORE_NAME,
) -> None:
    """Write a snapshot of ``store`` to ``storage`` under ``name``."""
    envelope = {"state": to_dict(store), "version": ENVELOPE_VERSION}
    storage.set_item(name, json.dumps(envelope, sort_keys=True))
    logger.debug(
        "Saved store %r at version %s", name, store.current_version_number
    )


def load_store(
    storage: StateStorage,
    name: str = DEFAULT_STORE_NAME,
) -> DocumentStore | None:
    """Read a store snapshot back.

    Returns:
        The restored store, or None if nothing is stored under ``name``.

    Raises:
        StorageError: If the value is not a valid envelope of the supported
            version, or its snapshot cannot be restored.

    """
    raw = storage.get_item(name)
    if raw is None:
        return None
    try:
        envelope = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored value {name!r} is not valid JSON: {e}") from e
    if not isinstance(envelope, dict) or "state" not in envelope:
        raise StorageError(f"Stored value {name!r} is not a store envelope")
    if envelope.get("version") != ENVELOPE_VERSION:
        raise StorageError(
            f"Unsupported envelope version {envelope.get('version')!r} for {name!r}; "
            f"expected {ENVELOPE_VERSION}"
        )
    try:
        return from_dict(envelope["state"])
    except (KeyError, TypeError, ValueError, LaminaError) as e:
        raise StorageError(f"Stored value {name!r} could not be restored: {e}") from e


__all__ = [
    "DEFAULT_STORE_NAME",
    "ENVELOPE_VERSION",
    "MemoryStorage",
    "StateStorage",
    "load_store",
    "save_store",
]
