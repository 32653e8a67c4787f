"""Tests for lamina.nodes records and kinds."""

from dataclasses import FrozenInstanceError, replace

import pytest

from lamina.nodes import (
    Annotation,
    AnnotationKind,
    AnnotationStatus,
    Element,
    ElementAnnotation,
    ElementKind,
)


class TestElementKind:
    def test_hierarchy(self) -> None:
        assert ElementKind.DOCUMENT.child_kind is ElementKind.PARAGRAPH
        assert ElementKind.PARAGRAPH.child_kind is ElementKind.SENTENCE
        assert ElementKind.SENTENCE.child_kind is ElementKind.WORD

    def test_word_has_no_child_kind(self) -> None:
        assert ElementKind.WORD.is_leaf
        assert not ElementKind.SENTENCE.is_leaf
        with pytest.raises(ValueError):
            _ = ElementKind.WORD.child_kind

    def test_string_values(self) -> None:
        assert ElementKind("paragraph") is ElementKind.PARAGRAPH
        assert AnnotationKind("critique") is AnnotationKind.CRITIQUE
        assert AnnotationStatus.OUTDATED == "outdated"


class TestRecords:
    def test_element_is_frozen(self) -> None:
        element = Element(id="w", kind=ElementKind.WORD, contents="Hi")
        with pytest.raises(FrozenInstanceError):
            element.contents = "Bye"  # type: ignore[misc]

    def test_element_defaults(self) -> None:
        element = Element(id="s", kind=ElementKind.SENTENCE)
        assert element.contents == ""
        assert element.children == ()
        assert element.created_at.tzinfo is not None

    def test_annotation_defaults(self) -> None:
        annotation = Annotation(id="a", kind=AnnotationKind.QUESTION, contents="Why?")
        assert annotation.status is AnnotationStatus.OPEN
        assert annotation.previous_version_id == ""


class TestValidity:
    def test_open_mapping(self) -> None:
        mapping = ElementAnnotation("e", "a", valid_from_version=3)
        assert mapping.is_open
        assert not mapping.is_valid_at(2)
        assert mapping.is_valid_at(3)
        assert mapping.is_valid_at(1000)

    def test_closed_mapping_bounds_are_inclusive(self) -> None:
        mapping = replace(ElementAnnotation("e", "a", valid_from_version=3), valid_through_version=5)
        assert not mapping.is_open
        assert [mapping.is_valid_at(n) for n in range(2, 7)] == [False, True, True, True, False]
