"""Append-only versioned store for Lamina.

DocumentStore is the single source of truth for elements, annotations,
element/annotation validity mappings and numbered document versions.
Records are only ever added. The two exceptions are bookkeeping, not
data: the current-version pointer moves, and an open validity mapping is
closed (replaced by a copy with ``valid_through_version`` set).

Thread Safety:
    DocumentStore is not thread-safe. It is meant to have one writer, the
    DocumentModel bound to it. The records it hands out are immutable and
    safe to share.

Example:
    >>> from lamina.nodes import Element, ElementKind
    >>> store = DocumentStore()
    >>> root = store.add_element(Element(id="r", kind=ElementKind.DOCUMENT))
    >>> store.add_version(root)
    1
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from lamina.errors import (
    InconsistentStateError,
    InvalidArgumentError,
    InvalidElementError,
    InvalidMappingError,
    MappingNotFoundError,
    VersionNotFoundError,
)
from lamina.nodes import Annotation, Element, ElementAnnotation, ElementKind, Version
from lamina.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentStore:
    """In-memory, normalized, append-only repository."""

    __slots__ = (
        "_annotations",
        "_element_annotations",
        "_elements",
        "_versions",
        "current_version_number",
        "format_version",
        "next_version_number",
    )

    def __init__(self, *, format_version: str = "1.0") -> None:
        self._elements: dict[str, Element] = {}
        self._annotations: dict[str, Annotation] = {}
        self._element_annotations: list[ElementAnnotation] = []
        self._versions: dict[int, Version] = {}
        self.current_version_number: int | None = None
        self.next_version_number: int = 1
        self.format_version = format_version

    # -- Elements --------------------------------------------------------------

    @staticmethod
    def _check_element(element: Element) -> None:
        if element.kind is not ElementKind.WORD and element.contents:
            raise InvalidElementError(
                element.id, f"{element.kind.value} elements cannot carry contents"
            )
        if element.kind is ElementKind.WORD and element.children:
            raise InvalidElementError(element.id, "word elements cannot have children")

    def add_element(self, element: Element) -> str:
        """Insert a new immutable element and return its id.

        Raises:
            InvalidElementError: If a non-word element carries contents, a
                word has children, or the id is already taken.

        """
        self._check_element(element)
        if element.id in self._elements:
            raise InvalidElementError(element.id, "id already in use")
        self._elements[element.id] = element
        return element.id

    def add_elements(self, elements: Iterable[Element]) -> list[str]:
        """Insert several elements; nothing is inserted if any is invalid."""
        batch = list(elements)
        seen: set[str] = set()
        for element in batch:
            self._check_element(element)
            if element.id in self._elements or element.id in seen:
                raise InvalidElementError(element.id, "id already in use")
            seen.add(element.id)
        for element in batch:
            self._elements[element.id] = element
        return [element.id for element in batch]

    def get_element(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def all_elements(self) -> tuple[Element, ...]:
        return tuple(self._elements.values())

    # -- Annotations -----------------------------------------------------------

    def add_annotation(self, annotation: Annotation, target_element_id: str) -> str:
        """Insert an annotation attached to ``target_element_id``.

        The new mapping is valid from the current version (0 when there is
        none yet) and open-ended.

        """
        self._annotations[annotation.id] = annotation
        self.add_element_annotation(
            ElementAnnotation(
                element_id=target_element_id,
                annotation_id=annotation.id,
                valid_from_version=self.current_version_number or 0,
            )
        )
        return annotation.id

    def add_element_annotation(self, mapping: ElementAnnotation) -> None:
        """Append a validity mapping.

        Raises:
            InvalidMappingError: If an open mapping already exists for the
                same element and annotation.

        """
        if mapping.is_open and self._find_open(mapping.element_id, mapping.annotation_id) is not None:
            raise InvalidMappingError(
                f"Open mapping already exists for element {mapping.element_id} "
                f"and annotation {mapping.annotation_id}"
            )
        self._element_annotations.append(mapping)

    def _find_open(self, element_id: str, annotation_id: str) -> int | None:
        for index, mapping in enumerate(self._element_annotations):
            if (
                mapping.element_id == element_id
                and mapping.annotation_id == annotation_id
                and mapping.is_open
            ):
                return index
        return None

    def update_element_annotation_validity(
        self, element_id: str, annotation_id: str, through_version: int
    ) -> None:
        """Close the open mapping between an element and an annotation.

        Raises:
            MappingNotFoundError: If no open mapping exists for the pair.

        """
        index = self._find_open(element_id, annotation_id)
        if index is None:
            raise MappingNotFoundError(element_id, annotation_id)
        closed = replace(self._element_annotations[index], valid_through_version=through_version)
        self._element_annotations[index] = closed

    def restore_annotation(self, annotation: Annotation) -> None:
        """Insert an annotation record without creating a mapping.

        Used when loading a snapshot whose mappings are restored separately.

        """
        self._annotations[annotation.id] = annotation

    def get_annotation(self, annotation_id: str) -> Annotation | None:
        return self._annotations.get(annotation_id)

    def all_annotations(self) -> tuple[Annotation, ...]:
        return tuple(self._annotations.values())

    def all_element_annotations(self) -> tuple[ElementAnnotation, ...]:
        return tuple(self._element_annotations)

    # -- Versions --------------------------------------------------------------

    def add_version(self, root_id: str, *, format_version: str | None = None) -> int:
        """Record a new version rooted at ``root_id`` and make it current.

        Returns:
            The newly allocated version number.

        Raises:
            InconsistentStateError: If the counter points at a recorded version.

        """
        number = self.next_version_number
        if number in self._versions:
            raise InconsistentStateError(f"Version {number} already exists")
        self._versions[number] = Version(
            id=str(number),
            version_number=number,
            root_id=root_id,
            format_version=format_version or self.format_version,
        )
        self.current_version_number = number
        self.next_version_number += 1
        logger.debug("Allocated version %d with root %s", number, root_id)
        return number

    def restore_version(self, version: Version) -> None:
        """Insert a previously recorded version without moving any pointer."""
        if version.version_number in self._versions:
            raise InvalidArgumentError(f"Version {version.version_number} already exists")
        self._versions[version.version_number] = version
        self.next_version_number = max(self.next_version_number, version.version_number + 1)

    def switch_current_version(self, version_number: int) -> None:
        """Point "current" at an existing version.

        Raises:
            VersionNotFoundError: If the number was never allocated.

        """
        if version_number not in self._versions:
            raise VersionNotFoundError(version_number)
        self.current_version_number = version_number

    def get_version(self, version_number: int) -> Version | None:
        return self._versions.get(version_number)

    def all_versions(self) -> tuple[Version, ...]:
        return tuple(self._versions[n] for n in sorted(self._versions))

    @property
    def current_version(self) -> Version | None:
        if self.current_version_number is None:
            return None
        return self._versions.get(self.current_version_number)

    @property
    def latest_version_number(self) -> int:
        return self.next_version_number - 1


__all__ = [
    "DocumentStore",
]
