"""Reuse matching between old and new segmentations.

Given the previous children of an element, as ``(id, text)`` pairs, and
the text parts a new segmentation produced, decide for each new part
whether to keep an old child as is, re-derive it using an old child as a
seed, or build it from scratch.

The match is greedy and order-preserving: a cursor moves forward through
the old parts and never back, so an old part is used at most once and
matches never cross.

Example:
    >>> matches = greedy_match_parts([("a", "A"), ("b", "B")], ["X", "A", "B"], str.split)
    >>> [m.old_index for m in matches]
    [None, 0, 1]

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass

DEFAULT_THRESHOLD = 0.25


def multiset_counts(items: Sequence[str]) -> Counter[str]:
    """Count the occurrences of each string."""
    return Counter(items)


def is_reordered_same_parts(old_parts: Sequence[str], new_parts: Sequence[str]) -> bool:
    """Whether ``new_parts`` is a reordering of ``old_parts``.

    True only when both hold the same strings with the same counts and the
    order differs. Identical sequences are not a reorder.

    """
    if len(old_parts) != len(new_parts):
        return False
    if list(old_parts) == list(new_parts):
        return False
    return multiset_counts(old_parts) == multiset_counts(new_parts)


def token_overlap(a: Sequence[str], b: Sequence[str]) -> int:
    """Count tokens of ``a`` also present in ``b``, each token of ``b`` used once."""
    counts = multiset_counts(b)
    matched = 0
    for token in a:
        if counts[token] > 0:
            matched += 1
            counts[token] -= 1
    return matched


@dataclass(frozen=True, slots=True)
class PartReuse:
    """Outcome of matching one new part.

    Attributes:
        old_index: Index into the old parts, or None for no match
        exact: True when the old part's text is identical

    """

    old_index: int | None
    exact: bool

    @property
    def is_partial(self) -> bool:
        return self.old_index is not None and not self.exact


_NO_MATCH = PartReuse(old_index=None, exact=False)


def _overlap_ratio(old_text: str, new_text: str, tokenize: Callable[[str], list[str]]) -> float:
    if not old_text.strip():
        return 0.0
    old_tokens = tokenize(old_text)
    if not old_tokens:
        return 0.0
    return token_overlap(old_tokens, tokenize(new_text)) / len(old_tokens)


def greedy_match_parts(
    old_parts: Sequence[tuple[str, str]],
    new_parts: Sequence[str],
    tokenize: Callable[[str], list[str]],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[PartReuse]:
    """Greedily match new text parts against old ``(id, text)`` parts.

    A pure reorder (same multiset of texts, different order) reuses
    nothing. Otherwise each new part scans forward from the cursor; at
    each old part it first tests exact equality, then whether the share
    of the old part's tokens found in the new part exceeds ``threshold``.
    The first old part passing either test is taken and the cursor moves
    past it. A new part with no match leaves the cursor where it was.

    Args:
        old_parts: Previous children as ``(id, text)`` pairs, in order.
        new_parts: New text parts, in order.
        tokenize: Splits a part into tokens for the overlap test.
        threshold: Overlap ratio that must be exceeded for a partial match.

    Returns:
        One PartReuse per new part, in order.

    """
    if is_reordered_same_parts([text for _, text in old_parts], new_parts):
        return [_NO_MATCH for _ in new_parts]

    result: list[PartReuse] = []
    cursor = 0
    for new_text in new_parts:
        matched = _NO_MATCH
        for j in range(cursor, len(old_parts)):
            old_text = old_parts[j][1]
            if old_text == new_text:
                matched = PartReuse(old_index=j, exact=True)
                break
            if _overlap_ratio(old_text, new_text, tokenize) > threshold:
                matched = PartReuse(old_index=j, exact=False)
                break
        if matched.old_index is not None:
            cursor = matched.old_index + 1
        result.append(matched)
    return result


__all__ = [
    "DEFAULT_THRESHOLD",
    "PartReuse",
    "greedy_match_parts",
    "is_reordered_same_parts",
    "multiset_counts",
    "token_overlap",
]
