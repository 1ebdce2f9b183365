import mermaidsmith


def test_get_version_matches_public_api() -> None:
    assert mermaidsmith.get_version() == mermaidsmith.__version__
    assert isinstance(mermaidsmith.__version__, str)
