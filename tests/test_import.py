"""Verify package imports work correctly."""


def test_import_lamina() -> None:
    """Test that lamina can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import lamina

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert lamina.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from lamina import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_resolve() -> None:
    import lamina

    for name in lamina.__all__:
        assert hasattr(lamina, name), name
