"""
Lamina — Versioned Hierarchical Text Model for Python

Stores a document as an immutable tree (document > paragraph > sentence >
word) in an append-only store. Every edit produces a new numbered version
that shares all unchanged subtrees with the previous one, and annotations
stay attached to elements across versions. Zero runtime dependencies.

Quick Start:
    >>> from lamina import DocumentModel
    >>> model = DocumentModel(seed_text="Life is good.")
    >>> version = model.update_element(model.get_root_element().id, "Life is very good.")
    >>> model.compute_full_contents(model.get_root_element().id)
    'Life is very good.'

    >>> # Go back in time
    >>> model.switch_to_version(version - 1)
    >>> model.compute_full_contents(model.get_root_element().id)
    'Life is good.'

Persistence:
    >>> from lamina import MemoryStorage, load_store, save_store
    >>> storage = MemoryStorage()
    >>> save_store(model.store, storage)
    >>> restored = DocumentModel(load_store(storage))
"""

from lamina.config import DEFAULT_CONFIG, ModelConfig
from lamina.errors import (
    AnnotationNotFoundError,
    CannotDeleteDocumentError,
    ElementNotFoundError,
    EmptyContentsError,
    InconsistentStateError,
    InvalidArgumentError,
    InvalidElementError,
    InvalidMappingError,
    InvalidReplacementError,
    LaminaError,
    MappingNotFoundError,
    NoActiveMappingError,
    NoCurrentVersionError,
    NoParentError,
    NotFoundError,
    NotInCurrentVersionError,
    SiblingNotFoundError,
    StorageError,
    VersionNotFoundError,
)
from lamina.grammar import join_contents, split_contents, tokenizer_for
from lamina.identity import IdFactory, new_id, sequential_ids
from lamina.model import DocumentModel
from lamina.nodes import (
    Annotation,
    AnnotationKind,
    AnnotationStatus,
    Element,
    ElementAnnotation,
    ElementKind,
    Version,
)
from lamina.reuse import PartReuse, greedy_match_parts, is_reordered_same_parts
from lamina.serialization import from_json, to_json
from lamina.storage import MemoryStorage, StateStorage, load_store, save_store
from lamina.store import DocumentStore

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "Annotation",
    "AnnotationKind",
    "AnnotationNotFoundError",
    "AnnotationStatus",
    "CannotDeleteDocumentError",
    "DocumentModel",
    "DocumentStore",
    "Element",
    "ElementAnnotation",
    "ElementKind",
    "ElementNotFoundError",
    "EmptyContentsError",
    "IdFactory",
    "InconsistentStateError",
    "InvalidArgumentError",
    "InvalidElementError",
    "InvalidMappingError",
    "InvalidReplacementError",
    "LaminaError",
    "MappingNotFoundError",
    "MemoryStorage",
    "ModelConfig",
    "NoActiveMappingError",
    "NoCurrentVersionError",
    "NoParentError",
    "NotFoundError",
    "NotInCurrentVersionError",
    "PartReuse",
    "SiblingNotFoundError",
    "StateStorage",
    "StorageError",
    "Version",
    "VersionNotFoundError",
    "__version__",
    "from_json",
    "greedy_match_parts",
    "is_reordered_same_parts",
    "join_contents",
    "load_store",
    "new_id",
    "save_store",
    "sequential_ids",
    "split_contents",
    "to_json",
    "tokenizer_for",
]
