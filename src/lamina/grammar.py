"""Segmentation grammar for the Lamina document tree.

Splitting rules, by the kind of the parts being produced:

- word: split on runs of whitespace
- sentence: split on whitespace that follows ``.``, ``!`` or ``?``
- paragraph: split on blank lines (newlines with only whitespace between)
- document: never split; a document update yields one document text

Joining is the inverse used to rebuild a non-leaf element's text from its
children: paragraphs are joined with a blank line, sentences and words
with a single space. Whitespace inside a part is normalized by the
round-trip; running it a second time changes nothing.

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

from __future__ import annotations

import re
from collections.abc import Callable

from lamina.nodes import ElementKind

Tokenizer = Callable[[str], list[str]]

_WORD_SPLIT = re.compile(r"\s+")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")

_JOINERS: dict[ElementKind, str] = {
    ElementKind.DOCUMENT: "\n\n",
    ElementKind.PARAGRAPH: " ",
    ElementKind.SENTENCE: " ",
}


def split_contents(text: str, kind: ElementKind) -> list[str]:
    """Split ``text`` into parts of the given kind.

    Args:
        text: Text to split.
        kind: Kind of the parts to produce.

    Returns:
        Non-empty parts in source order.

    Example:
        >>> split_contents("C D. E F.", ElementKind.SENTENCE)
        ['C D.', 'E F.']

    """
    match kind:
        case ElementKind.WORD:
            return [part for part in _WORD_SPLIT.split(text) if part]
        case ElementKind.SENTENCE:
            return [part.strip() for part in _SENTENCE_SPLIT.split(text) if part.strip()]
        case ElementKind.PARAGRAPH:
            return [part.strip() for part in _PARAGRAPH_SPLIT.split(text) if part.strip()]
        case ElementKind.DOCUMENT:
            return [text]
    raise ValueError(f"Unknown element kind: {kind!r}")


def join_contents(parts: list[str], kind: ElementKind) -> str:
    """Join the text of a ``kind`` element's children.

    Raises:
        ValueError: For WORD, which has no children to join.

    """
    joiner = _JOINERS.get(kind)
    if joiner is None:
        raise ValueError(f"Element kind {kind.value!r} has no children to join")
    return joiner.join(parts)


def _whole(text: str) -> list[str]:
    return [text]


def _words(text: str) -> list[str]:
    return split_contents(text, ElementKind.WORD)


def _sentences(text: str) -> list[str]:
    return split_contents(text, ElementKind.SENTENCE)


_TOKENIZERS: dict[ElementKind, Tokenizer] = {
    ElementKind.WORD: _whole,
    ElementKind.SENTENCE: _words,
    ElementKind.PARAGRAPH: _sentences,
}


def tokenizer_for(child_kind: ElementKind) -> Tokenizer:
    """Tokenizer used to compare two candidate children of ``child_kind``.

    A child is tokenized one level further down: sentences into words,
    paragraphs into sentences. A word is a single token, so two words only
    ever match exactly.

    Raises:
        ValueError: For DOCUMENT, which is never a child.

    """
    tokenizer = _TOKENIZERS.get(child_kind)
    if tokenizer is None:
        raise ValueError(f"Element kind {child_kind.value!r} is never matched as a child")
    return tokenizer


__all__ = [
    "Tokenizer",
    "join_contents",
    "split_contents",
    "tokenizer_for",
]
