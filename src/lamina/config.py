"""Model configuration for Lamina.

Configuration is an immutable value passed explicitly to each
DocumentModel. There is no process-wide default instance to mutate.

Usage:
    from lamina import DocumentModel, DocumentStore
    from lamina.config import ModelConfig

    model = DocumentModel(DocumentStore(), config=ModelConfig(reuse_threshold=0.5))

    # From a settings file or framework dict
    config = ModelConfig.from_dict({"validate_after_edit": True})

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from lamina.reuse import DEFAULT_THRESHOLD


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Immutable model configuration.

    Attributes:
        reuse_threshold: Token-overlap ratio a previous child must exceed
            to seed the re-derivation of a changed child
        format_version: Format tag written on every new Version record
        validate_after_edit: Run the parent-cache checker after each
            structural edit (diagnostic; logs, never raises)
        id_factory: Identifier generator; None uses lamina.identity.new_id

    """

    reuse_threshold: float = DEFAULT_THRESHOLD
    format_version: str = "1.0"
    validate_after_edit: bool = False
    id_factory: Callable[[], str] | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.reuse_threshold < 1.0:
            raise ValueError(
                f"reuse_threshold must be in [0, 1), got {self.reuse_threshold!r}"
            )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ModelConfig":
        """Create ModelConfig from dictionary.

        Only includes keys that are valid ModelConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ModelConfig attribute names.

        Returns:
            New ModelConfig instance with values from dict.

        Example:
            >>> config = ModelConfig.from_dict({
            ...     "reuse_threshold": 0.5,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.reuse_threshold
            0.5

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


DEFAULT_CONFIG: ModelConfig = ModelConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "ModelConfig",
]
