"""Identifier generation for Lamina records.

Identifiers are opaque strings. The model takes an ``IdFactory`` so tests
and embedding applications can supply their own; ``new_id`` is the
default: 16 characters drawn from an alphanumeric alphabet with
``secrets``, which is collision-free in practice.

"""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable

IdFactory = Callable[[], str]

ALPHANUMERIC = string.digits + string.ascii_lowercase + string.ascii_uppercase
ID_LENGTH = 16


def new_id() -> str:
    """Return a fresh random identifier."""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(ID_LENGTH))


def sequential_ids(prefix: str = "id") -> IdFactory:
    """Return a factory producing ``prefix-1``, ``prefix-2``, ...

    Deterministic ids make structure dumps and failing tests readable.

    """
    counter = 0

    def factory() -> str:
        nonlocal counter
        counter += 1
        return f"{prefix}-{counter}"

    return factory


__all__ = [
    "ALPHANUMERIC",
    "ID_LENGTH",
    "IdFactory",
    "new_id",
    "sequential_ids",
]
