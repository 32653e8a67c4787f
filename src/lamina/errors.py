"""Exception classes for Lamina.

Every failure of a public operation raises a subclass of LaminaError.
The three broad categories mirror how callers react to them:

- NotFoundError: something that must exist (element, parent, annotation,
  mapping, version) is missing.
- InvalidArgumentError: the request itself is unacceptable (blank text,
  deleting the document root, a non-word element carrying contents).
- InconsistentStateError: the model's derived state disagrees with the
  store. Indicates a bug, not bad input.

NotFoundError also derives from LookupError and InvalidArgumentError from
ValueError, so generic handlers keep working.
"""

from __future__ import annotations


class LaminaError(Exception):
    """Base exception for all Lamina errors.

    Subclass this for specific error categories.
    """

    pass


# =============================================================================
# Not found
# =============================================================================


class NotFoundError(LaminaError, LookupError):
    """A record required by the operation does not exist."""

    pass


class ElementNotFoundError(NotFoundError):
    """No element with the given id is in the store."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Element with id {element_id} not found")


class AnnotationNotFoundError(NotFoundError):
    """No annotation with the given id is in the store."""

    def __init__(self, annotation_id: str) -> None:
        self.annotation_id = annotation_id
        super().__init__(f"Annotation {annotation_id} not found")


class MappingNotFoundError(NotFoundError):
    """No open element/annotation mapping exists for the pair."""

    def __init__(self, element_id: str, annotation_id: str) -> None:
        self.element_id = element_id
        self.annotation_id = annotation_id
        super().__init__(
            f"ElementAnnotation not found for element {element_id} "
            f"and annotation {annotation_id}"
        )


class NoActiveMappingError(NotFoundError):
    """The annotation exists but is not attached to anything right now."""

    def __init__(self, annotation_id: str) -> None:
        self.annotation_id = annotation_id
        super().__init__(f"Active mapping for annotation {annotation_id} not found")


class VersionNotFoundError(NotFoundError):
    """The version number was never allocated."""

    def __init__(self, version_number: int) -> None:
        self.version_number = version_number
        super().__init__(f"Version {version_number} does not exist")


class NoCurrentVersionError(NotFoundError):
    """The store has no current version."""

    def __init__(self) -> None:
        super().__init__("No current version set")


class NoParentError(NotFoundError):
    """The element has no parent in the current version's tree."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Element with id {element_id} has no parent")


class NotInCurrentVersionError(NotFoundError):
    """The element exists but is not part of the current version's tree."""

    def __init__(self, element_id: str, version_number: int) -> None:
        self.element_id = element_id
        self.version_number = version_number
        super().__init__(f"Element {element_id} is not in version {version_number}")


class SiblingNotFoundError(NotFoundError):
    """The sibling is not listed among its parent's children."""

    def __init__(self, sibling_id: str, parent_id: str) -> None:
        self.sibling_id = sibling_id
        self.parent_id = parent_id
        super().__init__(f"Element {sibling_id} not found in parent {parent_id}")


# =============================================================================
# Invalid argument
# =============================================================================


class InvalidArgumentError(LaminaError, ValueError):
    """The caller passed input the operation cannot accept."""

    pass


class EmptyContentsError(InvalidArgumentError):
    """Update text is blank; callers must delete instead."""

    def __init__(self) -> None:
        super().__init__("New contents cannot be empty. Use delete_element to remove.")


class InvalidReplacementError(InvalidArgumentError):
    """A document element can only be replaced by exactly one element."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"Cannot update document element with more than one new element: got {count}"
        )


class CannotDeleteDocumentError(InvalidArgumentError):
    """The document root cannot be deleted."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Cannot delete document element {element_id}")


class InvalidElementError(InvalidArgumentError):
    """An element record violates a store invariant."""

    def __init__(self, element_id: str, reason: str) -> None:
        self.element_id = element_id
        self.reason = reason
        super().__init__(f"Invalid element {element_id}: {reason}")


class InvalidMappingError(InvalidArgumentError):
    """An element/annotation mapping violates a store invariant."""

    pass


# =============================================================================
# Internal consistency and persistence
# =============================================================================


class InconsistentStateError(LaminaError):
    """Derived state (e.g. the parent cache) disagrees with the store."""

    pass


class StorageError(LaminaError):
    """A persisted store snapshot could not be loaded."""

    pass
