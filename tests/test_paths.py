"""Tests for envsync.paths.PathResolver"""

import os

import pytest

from envsync.exceptions import PathNotFound
from envsync.paths import PathResolver

SEP = os.sep


class TestIsAbsolute:
    @pytest.mark.parametrize("path", ["/etc/app", "\\srv\\app", "C:\\Users", "c:/Users"])
    def test_absolute_forms(self, path):
        assert PathResolver.is_absolute(path)

    @pytest.mark.parametrize("path", [".env", "config/app.env", "C:relative", ""])
    def test_relative_forms(self, path):
        assert not PathResolver.is_absolute(path)


class TestNormalize:
    def test_mixed_separators_use_platform_separator(self):
        assert PathResolver.normalize("config\\sub/app.env") == SEP.join(["config", "sub", "app.env"])

    def test_relative_path_is_trimmed(self):
        assert PathResolver.normalize("config/") == "config"
        assert PathResolver.normalize("config\\") == "config"

    def test_absolute_path_keeps_leading_separator(self):
        assert PathResolver.normalize("/srv/app") == f"{SEP}srv{SEP}app"


class TestJoin:
    def test_join_absolute(self):
        assert PathResolver.join("/var", "www", "html") == f"{SEP}var{SEP}www{SEP}html"

    def test_join_keeps_relative_first_segment_relative(self):
        assert PathResolver.join("config", "/app/", ".env") == SEP.join(["config", "app", ".env"])

    def test_join_strips_trailing_separator_of_first(self):
        assert PathResolver.join("/var/", "www") == f"{SEP}var{SEP}www"

    def test_join_root(self):
        assert PathResolver.join("/", ".env") == f"{SEP}.env"

    def test_join_skips_empty_segments(self):
        assert PathResolver.join("/var", "", "www") == f"{SEP}var{SEP}www"

    def test_join_nothing(self):
        assert PathResolver.join() == ""


class TestResolve:
    def test_resolve_existing_absolute_path(self, tmp_path):
        target = tmp_path / ".env"
        target.write_text("A=1")

        assert PathResolver("/nonexistent").resolve(str(target)) == str(target)

    def test_resolve_against_base_path(self, tmp_path):
        (tmp_path / "config").mkdir()
        target = tmp_path / "config" / "app.env"
        target.write_text("A=1")

        resolver = PathResolver(tmp_path)
        assert resolver.resolve("config/app.env") == str(target)
        assert resolver.resolve("config\\app.env") == str(target)

    def test_resolve_missing_raises(self, tmp_path):
        resolver = PathResolver(tmp_path)

        with pytest.raises(PathNotFound) as exc_info:
            resolver.resolve("env.unknown")

        assert exc_info.value.path == "env.unknown"
        assert "Unable to locate env.unknown" in str(exc_info.value)

    def test_exists(self, tmp_path):
        (tmp_path / ".env").write_text("")
        resolver = PathResolver(tmp_path)

        assert resolver.exists(".env")
        assert not resolver.exists(".env.local")

    def test_default_base_path_is_cwd(self):
        assert PathResolver().base_path == os.getcwd()
