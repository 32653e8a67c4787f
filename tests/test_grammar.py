"""Tests for lamina.grammar segmentation rules."""

import pytest

from lamina.grammar import join_contents, split_contents, tokenizer_for
from lamina.nodes import ElementKind


class TestSplit:
    def test_words(self) -> None:
        assert split_contents("  Hello   big\tworld ", ElementKind.WORD) == ["Hello", "big", "world"]

    def test_sentences(self) -> None:
        assert split_contents("Hi there! How are you? Fine.", ElementKind.SENTENCE) == [
            "Hi there!",
            "How are you?",
            "Fine.",
        ]

    def test_sentence_without_terminal_punctuation(self) -> None:
        assert split_contents("no punctuation here", ElementKind.SENTENCE) == [
            "no punctuation here"
        ]

    def test_abbreviation_like_periods_split(self) -> None:
        assert split_contents("e.g. this", ElementKind.SENTENCE) == ["e.g.", "this"]

    def test_paragraphs(self) -> None:
        text = "First para.\n\nSecond.\n  \n\nThird."
        assert split_contents(text, ElementKind.PARAGRAPH) == ["First para.", "Second.", "Third."]

    def test_single_newline_is_not_a_paragraph_break(self) -> None:
        assert split_contents("one\ntwo", ElementKind.PARAGRAPH) == ["one\ntwo"]

    def test_document_is_never_split(self) -> None:
        assert split_contents("A.\n\nB.", ElementKind.DOCUMENT) == ["A.\n\nB."]

    @pytest.mark.parametrize("kind", [ElementKind.WORD, ElementKind.SENTENCE, ElementKind.PARAGRAPH])
    def test_blank_yields_nothing(self, kind: ElementKind) -> None:
        assert split_contents("  \n\n  ", kind) == []


class TestJoin:
    def test_document_joins_with_blank_line(self) -> None:
        assert join_contents(["A.", "B."], ElementKind.DOCUMENT) == "A.\n\nB."

    @pytest.mark.parametrize("kind", [ElementKind.PARAGRAPH, ElementKind.SENTENCE])
    def test_others_join_with_space(self, kind: ElementKind) -> None:
        assert join_contents(["A", "B"], kind) == "A B"

    def test_word_cannot_join(self) -> None:
        with pytest.raises(ValueError):
            join_contents(["A"], ElementKind.WORD)


class TestTokenizer:
    def test_word_is_one_token(self) -> None:
        assert tokenizer_for(ElementKind.WORD)("Hello,") == ["Hello,"]

    def test_sentence_tokenized_into_words(self) -> None:
        assert tokenizer_for(ElementKind.SENTENCE)("Nice to meet you.") == [
            "Nice",
            "to",
            "meet",
            "you.",
        ]

    def test_paragraph_tokenized_into_sentences(self) -> None:
        assert tokenizer_for(ElementKind.PARAGRAPH)("A b. C d.") == ["A b.", "C d."]

    def test_document_has_no_tokenizer(self) -> None:
        with pytest.raises(ValueError):
            tokenizer_for(ElementKind.DOCUMENT)
