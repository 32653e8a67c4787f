"""Tests for ModelConfig and identifier factories."""

from dataclasses import FrozenInstanceError

import pytest

from lamina import DocumentModel, ModelConfig, new_id, sequential_ids
from lamina.identity import ALPHANUMERIC, ID_LENGTH


class TestModelConfig:
    def test_defaults(self) -> None:
        config = ModelConfig()
        assert config.reuse_threshold == 0.25
        assert config.format_version == "1.0"
        assert config.validate_after_edit is False
        assert config.id_factory is None

    def test_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            ModelConfig().reuse_threshold = 0.5  # type: ignore[misc]

    @pytest.mark.parametrize("threshold", [-0.1, 1.0, 2.0])
    def test_invalid_threshold(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="reuse_threshold"):
            ModelConfig(reuse_threshold=threshold)

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = ModelConfig.from_dict({"reuse_threshold": 0.5, "unknown_key": "ignored"})
        assert config.reuse_threshold == 0.5

    def test_format_version_is_stamped_on_versions(self) -> None:
        model = DocumentModel(seed_text="A.", config=ModelConfig(format_version="2.0"))
        assert {v.format_version for v in model.store.all_versions()} == {"2.0"}

    def test_higher_threshold_stops_partial_reuse(self) -> None:
        model = DocumentModel(seed_text="Nice to meet you.", config=ModelConfig(reuse_threshold=0.9))
        paragraph_id = model.get_root_element().children[0]
        old_words = {e.id for e, _ in model.walk() if e.contents}
        model.update_element(paragraph_id, "Very nice to meet you.")
        new_words = {e.id for e, _ in model.walk() if e.contents}
        # 3 of 4 words shared is below 0.9, so the sentence is rebuilt from scratch
        assert not old_words & new_words

    def test_id_factory_from_config(self) -> None:
        model = DocumentModel(config=ModelConfig(id_factory=sequential_ids("cfg")))
        assert model.get_root_element().id == "cfg-1"

    def test_explicit_id_factory_wins(self) -> None:
        model = DocumentModel(
            config=ModelConfig(id_factory=sequential_ids("cfg")),
            id_factory=sequential_ids("arg"),
        )
        assert model.get_root_element().id == "arg-1"


class TestIdentity:
    def test_new_id_shape(self) -> None:
        value = new_id()
        assert len(value) == ID_LENGTH
        assert set(value) <= set(ALPHANUMERIC)

    def test_new_ids_differ(self) -> None:
        assert len({new_id() for _ in range(200)}) == 200

    def test_sequential_ids(self) -> None:
        factory = sequential_ids("x")
        assert [factory(), factory(), factory()] == ["x-1", "x-2", "x-3"]

    def test_sequential_factories_are_independent(self) -> None:
        a, b = sequential_ids(), sequential_ids()
        a()
        assert b() == "id-1"
