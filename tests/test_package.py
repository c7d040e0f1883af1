"""Basic tests for the envsync package."""


def test_import_envsync():
    """Test that envsync can be imported."""
    import envsync

    assert hasattr(envsync, "__version__")
    assert envsync.__version__ == "1.0.0"


def test_version_format():
    """Test that version follows semver format."""
    import envsync

    parts = envsync.__version__.split(".")
    assert len(parts) == 3
    assert all(p.isdigit() for p in parts)


def test_public_surface_is_exported():
    """Test that the main entry points are importable from the top level."""
    import envsync

    for name in ("Env", "LoaderRegistry", "PathResolver", "EnvironmentSync", "EnvSyncError"):
        assert name in envsync.__all__
        assert hasattr(envsync, name)
