"""Edit a paragraph and see which elements were reused — O(change) new nodes."""

from lamina import DocumentModel, ElementKind

model = DocumentModel(seed_text="Hello. Nice to meet you.\n\nSecond paragraph.")
before = {e.id for e, _ in model.walk()}

# User edits the first paragraph
first_paragraph = model.get_root_element().children[0]
version = model.update_element(first_paragraph, "Hello. Very nice to meet you.")

after = [(e, depth) for e, depth in model.walk()]
print(f"Version {version}:")
for element, depth in after:
    label = element.contents if element.kind is ElementKind.WORD else element.kind.value
    status = "reused" if element.id in before else "new"
    print(f"{'  ' * depth}{label:<12} {status}")

model.switch_to_version(version - 1)
print()
print("Previous version still reads:", repr(model.compute_full_contents(model.get_root_element().id)))
