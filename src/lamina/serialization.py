"""Store serialization: JSON round-trip for a whole DocumentStore.

Converts every record held by a store (elements, annotations, validity
mappings, versions) plus its version pointers to a JSON-compatible dict
and back. Each record carries a ``_type`` discriminator; timestamps are
ISO 8601 strings.

All output is deterministic (sorted keys) so snapshots can be diffed and
hashed.

Example:
    from lamina import DocumentModel
    from lamina.serialization import to_json, from_json

    model = DocumentModel(seed_text="Hello world.")
    restored = from_json(to_json(model.store))
    assert restored.current_version_number == model.current_version_number

Thread Safety:
    All functions are pure with respect to their inputs. Do not serialize
    a store while its model is editing it.

"""

import json
from dataclasses import fields
from datetime import datetime
from enum import Enum
from typing import Any

from lamina.nodes import (
    Annotation,
    AnnotationKind,
    AnnotationStatus,
    Element,
    ElementAnnotation,
    ElementKind,
    Version,
)
from lamina.store import DocumentStore

# Registry of record type names to classes for deserialization
_RECORD_TYPES: dict[str, type] = {
    "Element": Element,
    "Annotation": Annotation,
    "ElementAnnotation": ElementAnnotation,
    "Version": Version,
}

# Fields that need more than a JSON primitive to rebuild
_FIELD_DECODERS: dict[str, Any] = {
    "status": AnnotationStatus,
    "created_at": datetime.fromisoformat,
    "children": tuple,
}


def record_to_dict(record: Any) -> dict[str, Any]:
    """Convert a record to a JSON-compatible dict with a ``_type`` field."""
    result: dict[str, Any] = {"_type": type(record).__name__}
    for f in fields(record):
        result[f.name] = _serialize_value(getattr(record, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, tuple):
        return list(value)
    # Primitives: str, int, None
    return value


def record_from_dict(data: dict[str, Any]) -> Any:
    """Rebuild a record from a dict produced by record_to_dict.

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized record"
        raise ValueError(msg)

    record_cls = _RECORD_TYPES.get(type_name)
    if record_cls is None:
        msg = f"Unknown record type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(record_cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name == "kind":
            kwargs[f.name] = (ElementKind if record_cls is Element else AnnotationKind)(raw)
        elif (decoder := _FIELD_DECODERS.get(f.name)) is not None and raw is not None:
            kwargs[f.name] = decoder(raw)
        else:
            kwargs[f.name] = raw
    return record_cls(**kwargs)


def to_dict(store: DocumentStore) -> dict[str, Any]:
    """Snapshot a store as a JSON-compatible dict."""
    return {
        "_type": "DocumentStore",
        "format_version": store.format_version,
        "current_version_number": store.current_version_number,
        "next_version_number": store.next_version_number,
        "elements": [record_to_dict(e) for e in store.all_elements()],
        "annotations": [record_to_dict(a) for a in store.all_annotations()],
        "element_annotations": [record_to_dict(m) for m in store.all_element_annotations()],
        "versions": [record_to_dict(v) for v in store.all_versions()],
    }


def from_dict(data: dict[str, Any]) -> DocumentStore:
    """Rebuild a store from a snapshot produced by to_dict.

    Records go back through the store's own insertion checks, so a
    snapshot that breaks a store invariant is rejected.

    Raises:
        ValueError: If the snapshot is not a DocumentStore snapshot.

    """
    if data.get("_type") != "DocumentStore":
        msg = f"Expected DocumentStore snapshot, got {data.get('_type')!r}"
        raise ValueError(msg)

    store = DocumentStore(format_version=data.get("format_version", "1.0"))
    store.add_elements(record_from_dict(raw) for raw in data.get("elements", []))

    for raw in data.get("annotations", []):
        store.restore_annotation(record_from_dict(raw))
    for raw in data.get("element_annotations", []):
        store.add_element_annotation(record_from_dict(raw))

    for raw in data.get("versions", []):
        store.restore_version(record_from_dict(raw))
    highest = max((v.version_number for v in store.all_versions()), default=0)
    # A stale counter must never point back at a recorded version
    store.next_version_number = max(data.get("next_version_number", 0), highest + 1)
    current = data.get("current_version_number")
    if current is not None:
        store.switch_current_version(current)
    return store


def to_json(store: DocumentStore, *, indent: int | None = None) -> str:
    """Serialize a store to a JSON string (sorted keys)."""
    return json.dumps(to_dict(store), sort_keys=True, indent=indent)


def from_json(data: str) -> DocumentStore:
    """Deserialize a store from a JSON string produced by to_json."""
    return from_dict(json.loads(data))


__all__ = [
    "from_dict",
    "from_json",
    "record_from_dict",
    "record_to_dict",
    "to_dict",
    "to_json",
]
