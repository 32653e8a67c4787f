"""Property-based tests for document model invariants using Hypothesis.

These tests verify that the structural guarantees hold for arbitrary
documents and edits, not only the hand-picked examples.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from lamina import DocumentModel, ElementKind

_word = st.text(alphabet="abcXY", min_size=1, max_size=4)
_sentence = st.builds(
    lambda words, end: " ".join(words) + end,
    st.lists(_word, min_size=1, max_size=4),
    st.sampled_from([".", "!", "?"]),
)
_paragraph = st.lists(_sentence, min_size=1, max_size=3).map(" ".join)
_document = st.lists(_paragraph, min_size=1, max_size=3).map("\n\n".join)


def _text(model: DocumentModel) -> str:
    return model.compute_full_contents(model.get_root_element().id)


def _ancestors(model: DocumentModel, element_id: str) -> list[str]:
    chain = []
    parent = model.parent_of(element_id)
    while parent is not None:
        chain.append(parent)
        parent = model.parent_of(parent)
    return chain


class TestStructureInvariants:
    @given(_document)
    @settings(max_examples=50, deadline=None)
    def test_round_trip(self, text: str) -> None:
        model = DocumentModel(seed_text=text)
        assert _text(model) == text

    @given(_document)
    @settings(max_examples=50, deadline=None)
    def test_reapplying_text_keeps_words(self, text: str) -> None:
        model = DocumentModel(seed_text=text)
        words = [e.id for e, _ in model.walk() if e.kind is ElementKind.WORD]
        model.update_element(model.get_root_element().id, _text(model))
        assert _text(model) == text
        assert [e.id for e, _ in model.walk() if e.kind is ElementKind.WORD] == words

    @given(_document)
    @settings(max_examples=50, deadline=None)
    def test_kinds_and_contents(self, text: str) -> None:
        model = DocumentModel(seed_text=text)
        for element, depth in model.walk():
            assert element.kind is list(ElementKind)[depth]
            if element.kind is ElementKind.WORD:
                assert element.contents
                assert element.children == ()
            else:
                assert element.contents == ""
                assert element.children

    @given(_document, st.data())
    @settings(max_examples=50, deadline=None)
    def test_parent_cache_after_edit(self, text: str, data: st.DataObject) -> None:
        model = DocumentModel(seed_text=text)
        elements = [e for e, _ in model.walk() if e.kind is not ElementKind.DOCUMENT]
        target = data.draw(st.sampled_from(elements))
        replacement = data.draw(_sentence)
        model.update_element(target.id, replacement)
        assert model.validate_parent_map() == []


class TestVersionInvariants:
    @given(_document, st.data())
    @settings(max_examples=50, deadline=None)
    def test_edit_creates_new_leaf_and_ancestors(self, text: str, data: st.DataObject) -> None:
        model = DocumentModel(seed_text=text)
        words = [e for e, _ in model.walk() if e.kind is ElementKind.WORD]
        target = data.draw(st.sampled_from(words))
        new_text = target.contents + "Z"
        before_ids = {e.id for e, _ in model.walk()}
        old_chain = [target.id, *_ancestors(model, target.id)]

        model.update_element(target.id, new_text)

        after_ids = {e.id for e, _ in model.walk()}
        for old_id in old_chain:
            assert old_id not in after_ids
        new_word = next(
            e for e, _ in model.walk() if e.kind is ElementKind.WORD and e.id not in before_ids
        )
        assert new_word.contents == new_text
        for new_id in [new_word.id, *_ancestors(model, new_word.id)]:
            assert new_id not in before_ids

    @given(_document, st.lists(_sentence, min_size=1, max_size=4))
    @settings(max_examples=30, deadline=None)
    def test_old_versions_never_change(self, text: str, edits: list[str]) -> None:
        model = DocumentModel(seed_text=text)
        snapshots = {model.current_version_number: _text(model)}
        for edit in edits:
            first_sentence = next(e for e, _ in model.walk() if e.kind is ElementKind.SENTENCE)
            version = model.update_element(first_sentence.id, edit)
            snapshots[version] = _text(model)

        assert sorted(snapshots) == list(range(2, 2 + len(edits) + 1))
        for version, expected in snapshots.items():
            model.switch_to_version(version)
            assert _text(model) == expected
