"""Document model: editing and querying over an append-only store.

The model makes the tree feel mutable while the store only ever grows.
Every structural edit:

1. Segments the new text according to the edited element's kind.
2. Aligns the new parts with the old element's children (see
   lamina.reuse) and resolves each part to a child id: reuse the old child
   as is, re-derive it with the old child as a seed, or build it fresh.
3. Creates a new element over the resolved children.
4. Bubbles the change up: each ancestor is copied with the edited child
   spliced out and the replacement(s) spliced in, until a new document
   element exists.
5. Records that document as the root of a new version.

Elements are only written to the store before the version that reaches
them is recorded, so a failed edit leaves the current version untouched
(orphaned elements are harmless).

Annotation operations do not change the tree. Each one opens a new
version with the same root so that validity intervals have a clean
boundary, then closes and/or opens element/annotation mappings.

The parent cache (child id -> parent id) is private derived state. It is
valid for the current version's tree, rebuilt by traversal whenever the
current version changes, and only added to during edits.

Thread Safety:
    A DocumentModel is not thread-safe: it is the single writer of its
    store. Records it returns are immutable.

Example:
    >>> model = DocumentModel(seed_text="A B.\\n\\nC D. E F.")
    >>> root = model.get_root_element()
    >>> len(root.children)
    2
    >>> model.compute_full_contents(root.id)
    'A B.\\n\\nC D. E F.'

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import replace
from datetime import UTC, datetime

from lamina.config import DEFAULT_CONFIG, ModelConfig
from lamina.errors import (
    AnnotationNotFoundError,
    CannotDeleteDocumentError,
    ElementNotFoundError,
    EmptyContentsError,
    InconsistentStateError,
    InvalidReplacementError,
    NoActiveMappingError,
    NoCurrentVersionError,
    NoParentError,
    NotInCurrentVersionError,
    SiblingNotFoundError,
)
from lamina.grammar import join_contents, split_contents, tokenizer_for
from lamina.identity import IdFactory, new_id
from lamina.nodes import (
    Annotation,
    AnnotationKind,
    AnnotationStatus,
    Element,
    ElementAnnotation,
    ElementKind,
)
from lamina.reuse import greedy_match_parts
from lamina.store import DocumentStore
from lamina.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentModel:
    """Editing and querying API over a DocumentStore.

    Args:
        store: Store to bind to. A fresh, empty store is created if None.
        seed_text: Text to load when the current root has no children.
        config: Model configuration (defaults to ModelConfig()).
        id_factory: Identifier generator; overrides ``config.id_factory``.

    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        seed_text: str = "",
        *,
        config: ModelConfig | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._store = store if store is not None else DocumentStore(
            format_version=self._config.format_version
        )
        self._new_id: IdFactory = id_factory or self._config.id_factory or new_id
        self._parent_map: dict[str, str] = {}
        self._created_count = 0

        self._rebuild_caches()
        if self._store.current_version_number is None:
            logger.info("Creating initial root element")
            root = self._create_element(ElementKind.DOCUMENT)
            self._store.add_version(root.id, format_version=self._config.format_version)

        root = self.get_root_element()
        if not root.children and seed_text.strip():
            self.update_element(root.id, seed_text)

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def config(self) -> ModelConfig:
        return self._config

    # =========================================================================
    # Parent cache
    # =========================================================================

    def _rebuild_caches(self) -> None:
        self._parent_map.clear()
        version = self._store.current_version
        if version is None:
            return
        root = self._store.get_element(version.root_id)
        if root is None:
            return
        stack = [root]
        while stack:
            element = stack.pop()
            for child_id in element.children:
                self._parent_map[child_id] = element.id
                child = self._store.get_element(child_id)
                if child is not None:
                    stack.append(child)

    def parent_of(self, element_id: str) -> str | None:
        """Parent id of an element in the current tree, or None for the root."""
        return self._parent_map.get(element_id)

    def _require_parent(self, element_id: str) -> str:
        parent_id = self._parent_map.get(element_id)
        if parent_id is None:
            raise NoParentError(element_id)
        return parent_id

    def _check_in_current_tree(self, element_id: str) -> None:
        """Walk the cached parent chain up to the current root.

        Elements from older versions keep their stale cache entries, so an
        element is only editable if every link on the way up is confirmed
        by the parent's children and the walk ends at the current root.

        """
        root_id = self.get_root_element().id
        current = element_id
        while current != root_id:
            parent_id = self._parent_map.get(current)
            if parent_id is None or current not in self.get_element(parent_id).children:
                raise NotInCurrentVersionError(element_id, self.current_version_number)
            current = parent_id

    # =========================================================================
    # Read
    # =========================================================================

    def get_root_element(self) -> Element:
        """Root element of the current version.

        Raises:
            NoCurrentVersionError: If the store has no current version.
            InconsistentStateError: If the version's root is not in the store.

        """
        version = self._store.current_version
        if version is None:
            raise NoCurrentVersionError()
        root = self._store.get_element(version.root_id)
        if root is None:
            raise InconsistentStateError(f"Root element with id {version.root_id} not found")
        return root

    def get_element(self, element_id: str) -> Element:
        """Get an element or raise.

        Elements are never removed, so a miss means a bad id or a corrupt
        store.

        Raises:
            ElementNotFoundError: If no element has this id.

        """
        element = self._store.get_element(element_id)
        if element is None:
            raise ElementNotFoundError(element_id)
        return element

    def compute_full_contents(self, element_id: str) -> str:
        """Reconstruct the text of any element from its descendants."""
        element = self.get_element(element_id)
        if element.kind is ElementKind.WORD:
            return element.contents
        return join_contents(
            [self.compute_full_contents(child_id) for child_id in element.children],
            element.kind,
        )

    def walk(self, element_id: str | None = None) -> Iterator[tuple[Element, int]]:
        """Yield ``(element, depth)`` depth-first, parents before children.

        Starts at the current root when ``element_id`` is None.

        """
        start = self.get_root_element() if element_id is None else self.get_element(element_id)
        stack: list[tuple[Element, int]] = [(start, 0)]
        while stack:
            element, depth = stack.pop()
            yield element, depth
            for child_id in reversed(element.children):
                stack.append((self.get_element(child_id), depth + 1))

    # =========================================================================
    # Versions
    # =========================================================================

    @property
    def current_version_number(self) -> int:
        number = self._store.current_version_number
        if number is None:
            raise NoCurrentVersionError()
        return number

    @property
    def latest_version_number(self) -> int:
        return self._store.latest_version_number

    def switch_to_version(self, version_number: int) -> None:
        """Make an existing version current and rebuild the parent cache.

        Raises:
            VersionNotFoundError: If the number was never allocated.

        """
        self._store.switch_current_version(version_number)
        self._rebuild_caches()
        logger.debug("Switched to version %d", version_number)

    def _commit(self, root_id: str) -> int:
        version = self._store.add_version(root_id, format_version=self._config.format_version)
        if self._config.validate_after_edit:
            self.validate_parent_map()
        return version

    # =========================================================================
    # Structural edits
    # =========================================================================

    def update_element(self, element_id: str, new_contents: str) -> int:
        """Replace an element's text, reusing unchanged descendants.

        Words get a new element (or keep theirs if the text is unchanged).
        Higher kinds are re-segmented and their children matched against
        the old ones. The text may split into several elements of the same
        kind (e.g. a word edited to "X Y" becomes two words).

        Args:
            element_id: Element to update; must be in the current tree.
            new_contents: Non-blank replacement text. Use delete_element
                to remove an element.

        Returns:
            Number of the new current version.

        Raises:
            EmptyContentsError: If ``new_contents`` is blank.
            InvalidReplacementError: If a document update yields more than
                one element.

        """
        if not new_contents or not new_contents.strip():
            raise EmptyContentsError()
        old_element = self.get_element(element_id)
        self._check_in_current_tree(element_id)

        created_before = self._created_count
        new_ids = self._parse_contents_to_elements(new_contents, old_element.kind, old_element.id)
        if not new_ids:
            raise InconsistentStateError(
                f"No new elements created from contents for element with id {element_id}"
            )
        version = self._replace_element(old_element, new_ids)
        logger.debug(
            "Updated %s %s into %d element(s), %d created, version %d",
            old_element.kind.value,
            element_id,
            len(new_ids),
            self._created_count - created_before,
            version,
        )
        return version

    def delete_element(self, element_id: str) -> int:
        """Remove an element from the current tree.

        A sentence or paragraph left without children is deleted too, so
        empty containers never survive. The document itself may end up
        with no paragraphs.

        Returns:
            Number of the new current version.

        Raises:
            CannotDeleteDocumentError: If the element is a document.

        """
        element = self.get_element(element_id)
        if element.kind is ElementKind.DOCUMENT:
            raise CannotDeleteDocumentError(element_id)
        self._check_in_current_tree(element_id)

        parent = self.get_element(self._require_parent(element_id))
        remaining = [child_id for child_id in parent.children if child_id != element_id]
        if not remaining and parent.kind is not ElementKind.DOCUMENT:
            return self.delete_element(parent.id)
        return self._replace_element(element, [])

    def add_after(self, sibling_id: str, contents: str) -> tuple[int, list[str]]:
        """Insert new elements of the sibling's kind right after it.

        ``contents`` is parsed from scratch; it may yield several siblings
        (e.g. two sentences).

        Returns:
            ``(version_number, new_ids)``.

        Raises:
            EmptyContentsError: If ``contents`` is blank.
            NoParentError: If the sibling is the document root.
            SiblingNotFoundError: If the parent does not list the sibling.

        """
        if not contents or not contents.strip():
            raise EmptyContentsError()
        sibling = self.get_element(sibling_id)
        parent_id = self._parent_map.get(sibling_id)
        if parent_id is None or sibling.kind is ElementKind.DOCUMENT:
            raise NoParentError(sibling_id)
        parent = self.get_element(parent_id)
        if sibling_id not in parent.children:
            raise SiblingNotFoundError(sibling_id, parent_id)
        self._check_in_current_tree(parent_id)

        new_ids = self._parse_contents_to_elements(contents, sibling.kind)
        if not new_ids:
            logger.warning("No new elements were created from the provided content")
            return self.current_version_number, []

        children = list(parent.children)
        index = children.index(sibling_id)
        children[index + 1 : index + 1] = new_ids
        new_parent = self._create_element(parent.kind, children=tuple(children))
        version = self._replace_element(parent, [new_parent.id])
        return version, new_ids

    # -- Segmentation and reuse ------------------------------------------------

    def _create_element(
        self,
        kind: ElementKind,
        contents: str = "",
        children: Sequence[str] = (),
    ) -> Element:
        """Create and store an element, registering its children's parent."""
        element = Element(
            id=self._new_id(),
            kind=kind,
            contents=contents if kind is ElementKind.WORD else "",
            children=tuple(children),
            created_at=datetime.now(UTC),
        )
        self._store.add_element(element)
        for child_id in element.children:
            self._parent_map[child_id] = element.id
        self._created_count += 1
        return element

    def _parse_contents_to_elements(
        self,
        contents: str,
        kind: ElementKind,
        previous_id: str | None = None,
    ) -> list[str]:
        """Turn text into element ids of ``kind``, reusing ``previous_id``'s subtree.

        Returns one id per part ``contents`` splits into at this level.

        """
        parts = split_contents(contents, kind)
        previous_children: tuple[str, ...] = ()
        previous_text: str | None = None
        if previous_id is not None:
            previous_children = self.get_element(previous_id).children
            previous_text = self.compute_full_contents(previous_id)

        if len(parts) > 1:
            # The previous element can only be kept by one part: the first
            # whose text is identical to it. Other parts are built without a
            # seed, even if they would partially match.
            ids: list[str] = []
            used_previous = False
            for part in parts:
                if previous_id is not None and not used_previous and part == previous_text:
                    used_previous = True
                    ids.append(previous_id)
                else:
                    ids.extend(self._parse_contents_to_elements(part, kind))
            return ids
        if not parts:
            return []

        part = parts[0]
        if kind is ElementKind.WORD:
            if previous_id is not None and part == previous_text:
                return [previous_id]
            return [self._create_element(ElementKind.WORD, part).id]

        child_parts = split_contents(part, kind.child_kind)
        child_ids = self._match_and_reuse_children(kind, child_parts, previous_children)
        return [self._create_element(kind, children=child_ids).id]

    def _match_and_reuse_children(
        self,
        kind: ElementKind,
        new_parts: list[str],
        previous_children: Sequence[str] = (),
    ) -> list[str]:
        """Resolve child text parts of a ``kind`` element to child ids."""
        child_kind = kind.child_kind
        child_ids: list[str] = []
        if not previous_children:
            for part in new_parts:
                child_ids.extend(self._parse_contents_to_elements(part, child_kind))
            return child_ids

        old_parts = [
            (child_id, self.compute_full_contents(child_id)) for child_id in previous_children
        ]
        matches = greedy_match_parts(
            old_parts,
            new_parts,
            tokenizer_for(child_kind),
            self._config.reuse_threshold,
        )
        for match, part in zip(matches, new_parts, strict=True):
            if match.old_index is None:
                child_ids.extend(self._parse_contents_to_elements(part, child_kind))
            elif match.exact:
                child_ids.append(previous_children[match.old_index])
            else:
                child_ids.extend(
                    self._parse_contents_to_elements(
                        part, child_kind, previous_children[match.old_index]
                    )
                )
        return child_ids

    # -- Copy-on-write bubble-up -----------------------------------------------

    def _replace_element(self, original: Element, new_ids: Sequence[str]) -> int:
        """Replace ``original`` by ``new_ids`` and record a new version.

        A document can only be replaced by exactly one element, which
        becomes the new root. Anything else is spliced into a copy of its
        parent, and the copies continue up to a new document.

        Returns:
            Number of the new current version.

        """
        if original.kind is ElementKind.DOCUMENT:
            if len(new_ids) != 1:
                raise InvalidReplacementError(len(new_ids))
            return self._commit(new_ids[0])

        child_id = original.id
        replacement = list(new_ids)
        while True:
            old_parent_id = self._require_parent(child_id)
            new_parent = self._replace_parent(child_id, replacement)
            if new_parent.kind is ElementKind.DOCUMENT:
                return self._commit(new_parent.id)
            child_id, replacement = old_parent_id, [new_parent.id]

    def _replace_parent(self, old_child_id: str, replacement_ids: Sequence[str]) -> Element:
        """Copy the parent of ``old_child_id`` with the child replaced.

        Handles one level only; the caller repeats it up to the document.

        Returns:
            The new parent element.

        """
        old_parent = self.get_element(self._require_parent(old_child_id))
        if old_child_id not in old_parent.children:
            raise InconsistentStateError(
                f"Parent cache maps {old_child_id} to {old_parent.id}, "
                "which does not list it as a child"
            )
        new_children: list[str] = []
        for child_id in old_parent.children:
            if child_id == old_child_id:
                new_children.extend(replacement_ids)
            else:
                new_children.append(child_id)
        return self._create_element(old_parent.kind, children=new_children)

    # =========================================================================
    # Annotations
    # =========================================================================

    def _bump_version(self) -> int:
        return self._store.add_version(
            self.get_root_element().id, format_version=self._config.format_version
        )

    def _active_mapping(self, annotation_id: str) -> ElementAnnotation:
        for mapping in self._store.all_element_annotations():
            if mapping.annotation_id == annotation_id and mapping.is_open:
                return mapping
        raise NoActiveMappingError(annotation_id)

    def _require_annotation(self, annotation_id: str) -> Annotation:
        annotation = self._store.get_annotation(annotation_id)
        if annotation is None:
            raise AnnotationNotFoundError(annotation_id)
        return annotation

    def add_annotation(
        self,
        element_id: str,
        kind: AnnotationKind | str,
        contents: str,
    ) -> str:
        """Attach a new open annotation to an element.

        Returns:
            Id of the new annotation.

        """
        self.get_element(element_id)
        annotation_kind = AnnotationKind(kind)
        self._bump_version()
        annotation = Annotation(
            id=self._new_id(),
            kind=annotation_kind,
            contents=contents,
            status=AnnotationStatus.OPEN,
        )
        return self._store.add_annotation(annotation, element_id)

    def _supersede(self, annotation_id: str, **changes: object) -> str:
        old = self._require_annotation(annotation_id)
        mapping = self._active_mapping(annotation_id)
        version = self._bump_version()
        self._store.update_element_annotation_validity(
            mapping.element_id, annotation_id, version - 1
        )
        new = replace(
            old,
            id=self._new_id(),
            previous_version_id=annotation_id,
            created_at=datetime.now(UTC),
            **changes,
        )
        return self._store.add_annotation(new, mapping.element_id)

    def update_annotation(self, annotation_id: str, new_contents: str) -> str:
        """Create a new version of an annotation with new contents.

        Returns:
            Id of the new annotation record.

        Raises:
            AnnotationNotFoundError: If the annotation does not exist.
            NoActiveMappingError: If it is not attached to anything.

        """
        return self._supersede(annotation_id, contents=new_contents)

    def change_annotation_status(
        self, annotation_id: str, new_status: AnnotationStatus | str
    ) -> str:
        """Create a new version of an annotation with a new status.

        Returns:
            Id of the new annotation record.

        """
        return self._supersede(annotation_id, status=AnnotationStatus(new_status))

    def delete_annotation(self, annotation_id: str) -> int:
        """End an annotation's validity. No new record is created.

        Returns:
            Number of the new current version.

        """
        mapping = self._active_mapping(annotation_id)
        version = self._bump_version()
        self._store.update_element_annotation_validity(
            mapping.element_id, annotation_id, version - 1
        )
        return version

    def get_annotations_for(self, element_id: str) -> list[Annotation]:
        """Annotations attached to ``element_id`` at the current version."""
        current = self._store.current_version_number
        if current is None:
            return []
        annotations: list[Annotation] = []
        for mapping in self._store.all_element_annotations():
            if mapping.element_id == element_id and mapping.is_valid_at(current):
                annotation = self._store.get_annotation(mapping.annotation_id)
                if annotation is not None:
                    annotations.append(annotation)
        return annotations

    def annotation_history(self, annotation_id: str) -> list[Annotation]:
        """An annotation and every record it supersedes, newest first."""
        history = [self._require_annotation(annotation_id)]
        while history[-1].previous_version_id:
            history.append(self._require_annotation(history[-1].previous_version_id))
        return history

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def validate_parent_map(self) -> list[str]:
        """Compare the parent cache with the current tree.

        Every disagreement is logged as a warning and returned. Never
        raises for a disagreement; this is a diagnostic.

        """
        problems: list[str] = []
        stack = [self.get_root_element()]
        while stack:
            element = stack.pop()
            seen: set[str] = set()
            for child_id in element.children:
                if child_id in seen:
                    problems.append(
                        f"Inconsistency: {child_id} listed more than once in {element.id}"
                    )
                    continue
                seen.add(child_id)
                parent_id = self._parent_map.get(child_id)
                if parent_id != element.id:
                    problems.append(
                        f"Inconsistency: parent_map({child_id}) = {parent_id}, actual {element.id}"
                    )
                child = self._store.get_element(child_id)
                if child is None:
                    problems.append(f"Inconsistency: child {child_id} of {element.id} not in store")
                    continue
                stack.append(child)
        for message in problems:
            logger.warning(message)
        return problems

    def check_invariants(self) -> bool:
        """Run all diagnostics; True when nothing was found."""
        return not self.validate_parent_map()

    def format_structure(self, element_id: str | None = None) -> str:
        """Indented outline of a subtree (the current root by default)."""
        lines = []
        for element, depth in self.walk(element_id):
            line = f"{'  ' * depth}{element.kind.value} {element.id}"
            if element.kind is ElementKind.WORD:
                line += f' "{element.contents}"'
            lines.append(line)
        return "\n".join(lines)

    def log_structure(self) -> None:
        logger.debug("Document structure:\n%s", self.format_structure())


__all__ = [
    "DocumentModel",
]
