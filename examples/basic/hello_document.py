"""Load text, edit a word, read it back — zero config, zero deps."""

from lamina import DocumentModel

model = DocumentModel(seed_text="Hello world. Nice to meet you.")
root = model.get_root_element()
print(model.format_structure())
print()

sentence_id = model.get_element(root.children[0]).children[0]
world_id = model.get_element(sentence_id).children[1]
model.update_element(world_id, "there.")
print(model.compute_full_contents(model.get_root_element().id))
