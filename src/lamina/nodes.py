"""Typed records for the Lamina document tree.

All records are frozen dataclasses with slots for:
- Immutability: a stored record never changes, so historical versions
  stay intact and records can be shared freely
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: match statements work naturally

Element hierarchy (closed, ordered):
document
└── paragraph
    └── sentence
        └── word   (the only kind that carries text)

Annotation records are versioned by chaining: editing an annotation
creates a new Annotation whose ``previous_version_id`` points at the old
one. ElementAnnotation ties an annotation to an element for a range of
document versions.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


def _now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Kinds
# =============================================================================


class ElementKind(StrEnum):
    """Kind of a node in the document tree, outermost first."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    WORD = "word"

    @property
    def child_kind(self) -> ElementKind:
        """Kind of this kind's children.

        Raises:
            ValueError: For WORD, which has no children.
        """
        child = _CHILD_KIND[self]
        if child is None:
            raise ValueError(f"Element kind {self.value!r} has no child kind")
        return child

    @property
    def is_leaf(self) -> bool:
        return _CHILD_KIND[self] is None


_CHILD_KIND: dict[ElementKind, ElementKind | None] = {
    ElementKind.DOCUMENT: ElementKind.PARAGRAPH,
    ElementKind.PARAGRAPH: ElementKind.SENTENCE,
    ElementKind.SENTENCE: ElementKind.WORD,
    ElementKind.WORD: None,
}


class AnnotationKind(StrEnum):
    CRITIQUE = "critique"
    SUGGESTION = "suggestion"
    QUESTION = "question"
    COMMENT = "comment"


class AnnotationStatus(StrEnum):
    OPEN = "open"
    RESOLVED = "resolved"
    OUTDATED = "outdated"


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class Element:
    """A node in the document tree.

    Non-leaf text is never stored: it is the join of the descendants'
    text. Only words carry ``contents``.

    Attributes:
        id: Opaque unique identifier
        kind: Position in the document > paragraph > sentence > word hierarchy
        contents: Word text; empty for every other kind
        children: Ordered child ids; empty for words
        created_at: Creation timestamp (informational only)

    """

    id: str
    kind: ElementKind
    contents: str = ""
    children: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True, slots=True)
class Version:
    """A numbered snapshot of the whole tree.

    Attributes:
        id: Identifier (the version number as a string)
        version_number: 1-based, monotonically increasing
        root_id: Id of a document-kind element
        format_version: Record format tag for persisted snapshots

    """

    id: str
    version_number: int
    root_id: str
    format_version: str = "1.0"


@dataclass(frozen=True, slots=True)
class Annotation:
    """A comment, critique, suggestion or question.

    ``previous_version_id`` links to the annotation this one supersedes,
    or is empty for a first version.

    """

    id: str
    kind: AnnotationKind
    contents: str
    status: AnnotationStatus = AnnotationStatus.OPEN
    previous_version_id: str = ""
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True, slots=True)
class ElementAnnotation:
    """Temporal validity of an annotation on an element.

    Both bounds are inclusive. ``valid_through_version`` is None while the
    mapping is open; closing it is the only transition a mapping ever
    makes, and it is done by replacing the record in the store.

    """

    element_id: str
    annotation_id: str
    valid_from_version: int
    valid_through_version: int | None = None

    @property
    def is_open(self) -> bool:
        return self.valid_through_version is None

    def is_valid_at(self, version_number: int) -> bool:
        """Whether the annotation is attached at ``version_number``."""
        if version_number < self.valid_from_version:
            return False
        return self.valid_through_version is None or version_number <= self.valid_through_version


__all__ = [
    "Annotation",
    "AnnotationKind",
    "AnnotationStatus",
    "Element",
    "ElementAnnotation",
    "ElementKind",
    "Version",
]
