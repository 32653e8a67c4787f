"""Annotate an element, persist the store, and restore it."""

from lamina import AnnotationKind, DocumentModel, MemoryStorage, load_store, save_store

model = DocumentModel(seed_text="Life is good.")
sentence = model.get_element(model.get_root_element().children[0]).children[0]
note = model.add_annotation(sentence, AnnotationKind.SUGGESTION, "Add an adverb?")
model.update_annotation(note, "Add 'very'?")

storage = MemoryStorage()
save_store(model.store, storage)
restored = DocumentModel(load_store(storage))

for annotation in restored.get_annotations_for(sentence):
    print(annotation.kind.value, annotation.contents)
    print("history:", [a.contents for a in restored.annotation_history(annotation.id)])
