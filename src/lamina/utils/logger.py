"""Namespaced loggers for Lamina.

Every module logs through ``get_logger(__name__)`` so all records land
under the ``lamina`` hierarchy. Nothing here installs handlers or sets
levels; an application enables output with e.g.
``logging.getLogger("lamina").setLevel(logging.DEBUG)``.

Levels used by the package:
    DEBUG: version allocation, per-edit creation counts, structure dumps
    INFO: synthesis of an initial document root
    WARNING: parent-cache disagreements found by validate_parent_map
"""

from __future__ import annotations

import logging

_ROOT = "lamina"


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name`` inside the ``lamina`` namespace.

    Names already under ``lamina`` are used as is.

    Example:
        >>> get_logger("mymodule").name
        'lamina.mymodule'
    """
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
