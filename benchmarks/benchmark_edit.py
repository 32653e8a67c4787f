"""Benchmark structural edits vs loading the whole document.

Compares a single-word update (O(depth) new elements) with re-deriving
the whole document from its text.

Run with:
    pytest benchmarks/benchmark_edit.py -v --benchmark-only
"""

import pytest

from lamina import DocumentModel, ElementKind


def _first_word(model: DocumentModel) -> str:
    return next(e.id for e, _ in model.walk() if e.kind is ElementKind.WORD)


@pytest.mark.benchmark(group="edit")
def test_benchmark_word_update(benchmark, large_document):
    """Benchmark replacing one word in a large document."""
    model = DocumentModel(seed_text=large_document)
    counter = iter(range(10**9))

    def update_word():
        model.update_element(_first_word(model), f"Word{next(counter)}")

    benchmark(update_word)


@pytest.mark.benchmark(group="edit")
def test_benchmark_document_update(benchmark, large_document):
    """Benchmark re-deriving the whole document with one sentence changed."""
    model = DocumentModel(seed_text=large_document)
    edited = large_document.replace("Paragraph 100 opens here.", "Paragraph 100 starts here.")
    texts = iter([edited, large_document] * 10**6)

    def update_document():
        model.update_element(model.get_root_element().id, next(texts))

    benchmark(update_document)


@pytest.mark.benchmark(group="load")
def test_benchmark_seed(benchmark, large_document):
    """Benchmark building a document from scratch (baseline)."""
    benchmark(lambda: DocumentModel(seed_text=large_document))
