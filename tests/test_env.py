"""Tests for the Env orchestrator."""

import os

import pytest

from envsync import Env
from envsync.config import Settings
from envsync.exceptions import (
    InvalidEnvKeyFormat,
    InvalidEnvLine,
    InvalidJson,
    MissingLoader,
    PathNotFound,
)
from envsync.loaders import DotenvLoader, JsonLoader
from envsync.parsers import LoadResult
from envsync.sync import MemoryEnvironmentSink

APP_JSON = '{\n"APP": {\n"ENV": "testing"\n},\n"SECRET": "abcd"\n}\n'


class CountingLoader:
    """Loader double that records how often it runs."""

    override = False

    def __init__(self, envs, groups=None):
        self.result = LoadResult(envs=envs, groups=groups or {})
        self.calls = 0

    def load(self):
        self.calls += 1
        return self.result


@pytest.fixture
def make_env(memory_sink, envsync_settings, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def _make(*args, **kwargs):
        kwargs.setdefault("sink", memory_sink)
        kwargs.setdefault("settings", envsync_settings)
        return Env(*args, **kwargs)

    return _make


class TestLoading:
    """Tests for loading through names, loaders and defaults"""

    def test_guessed_dotenv(self, make_env, write_env):
        path = write_env(".env", "FOO=bar\n")
        assert make_env(name=path).get("FOO") == "bar"

    def test_guessed_json(self, make_env, write_env):
        path = write_env("env.json", APP_JSON)
        env = make_env(name=path)

        assert env.get("APP_ENV") == "testing"
        assert env.get("SECRET") == "abcd"

    def test_multiple_files(self, make_env, write_env):
        env = make_env(name=[write_env(".env", "FOO=bar\n"), write_env("env.json", APP_JSON)])

        assert env.get("FOO") == "bar"
        assert env.get("APP_ENV") == "testing"

    def test_relative_name_uses_settings_base_path(self, make_env, write_env):
        write_env(".env", "FOO=bar\n")
        assert make_env(name=".env").get("FOO") == "bar"

    def test_base_path_argument(self, memory_sink, tmp_path):
        (tmp_path / "custom.env").write_text("FOO=bar\n")
        env = Env(name="custom.env", base_path=tmp_path, sink=memory_sink)
        assert env.get("FOO") == "bar"

    def test_explicit_loader(self, make_env, write_env):
        path = write_env(".env", "FOO=bar\n")
        assert make_env(DotenvLoader(path)).get("FOO") == "bar"

    def test_loader_sequence_merges_in_order(self, make_env, write_env):
        first = DotenvLoader(write_env(".env", "APP_ENV=dev\n"))
        second = JsonLoader(write_env("env.json", APP_JSON))

        assert make_env([first, second]).get("APP_ENV") == "dev"
        assert make_env([first, second], override=True).reload().get("APP_ENV") == "testing"

    def test_default_file(self, make_env, write_env):
        write_env(".env", "FOO=default\n")
        assert make_env().get("FOO") == "default"

    def test_missing_default_file_loads_nothing(self, make_env):
        env = make_env()
        assert env.get() == {}
        assert env.loaded

    def test_default_file_from_settings(self, memory_sink, env_dir, write_env):
        write_env("app.env", "FOO=bar\n")
        env = Env(sink=memory_sink, settings=Settings(base_path=env_dir, default_file="app.env"))
        assert env.get("FOO") == "bar"

    def test_override_from_settings(self, memory_sink, env_dir, write_env):
        path = write_env(".env", "SECRET=ABC\nSECRET=123\n")
        env = Env(name=path, sink=memory_sink, settings=Settings(base_path=env_dir, override=True))
        assert env.get("SECRET") == "123"

    def test_create_loads_immediately(self, memory_sink, envsync_settings, write_env):
        path = write_env(".env", "FOO=bar\n")
        env = Env.create(name=path, sink=memory_sink, settings=envsync_settings)

        assert env.loaded
        assert memory_sink.get("FOO") == "bar"


class TestOverride:
    """Override policy across sources"""

    def test_first_source_wins_by_default(self, make_env, write_env):
        a = write_env("a.env", "APP_ENV=dev\n")
        b = write_env("b.env", "APP_ENV=prod\n")
        assert make_env(name=[a, b]).get("APP_ENV") == "dev"

    def test_last_source_wins_with_override(self, make_env, write_env):
        a = write_env("a.env", "APP_ENV=dev\n")
        b = write_env("b.env", "APP_ENV=prod\n")
        assert make_env(name=[a, b], override=True).get("APP_ENV") == "prod"

    def test_repeated_key_in_one_file(self, make_env, write_env):
        path = write_env(".env", "SECRET=ABC\nSECRET=123")

        assert make_env(name=path).get("SECRET") == "ABC"
        assert make_env(name=path, override=True).reload().get("SECRET") == "123"


class TestQueries:
    """Tests for get/group/has/keys/dump"""

    def test_get_default_and_whole_map(self, make_env, write_env):
        env = make_env(name=write_env(".env", "A=1\nB=2\n"))

        assert env.get("MISSING") is None
        assert env.get("MISSING", "fallback") == "fallback"
        assert env.get() == {"A": "1", "B": "2"}

    def test_get_returns_copy(self, make_env, write_env):
        env = make_env(name=write_env(".env", "A=1\n"))
        env.get()["A"] = "changed"
        assert env.get("A") == "1"

    def test_group(self, make_env, write_env):
        env = make_env(name=write_env(".env", "DB_HOST=localhost\nDB_USER=root\nAPP_NAME=nubo\n"))

        assert env.group("DB") == {"DB_HOST": "localhost", "DB_USER": "root"}
        assert env.group() == {
            "DB": {"DB_HOST": "localhost", "DB_USER": "root"},
            "APP": {"APP_NAME": "nubo"},
        }
        assert env.group("NOPE") is None
        assert env.group("NOPE", {}) == {}

    def test_dotted_key_without_underscore_has_no_group(self, make_env, write_env):
        env = make_env(name=write_env(".env", "APP_NAME=nubo\nAPP.ENV=testing\n"))

        assert env.get("APP.ENV") == "testing"
        assert env.group("APP") == {"APP_NAME": "nubo"}

    def test_has_and_keys(self, make_env, write_env):
        env = make_env(name=write_env(".env", "A=1\nB=2\n"))

        assert env.has("A")
        assert not env.has("C")
        assert env.keys() == ["A", "B"]

    def test_dump(self, make_env, memory_sink, write_env):
        env = make_env(name=write_env(".env", "APP_NAME=nubo\nAPP.ENV=testing\n"))
        memory_sink.set("APP_NAME", "changed-outside")

        dump = env.dump()

        assert set(dump) == {"envs", "groups", "process"}
        assert dump["envs"] == {"APP_NAME": "nubo", "APP.ENV": "testing"}
        assert dump["groups"] == {"APP": {"APP_NAME": "nubo"}}
        assert dump["process"] == {"APP_NAME": "changed-outside", "APP.ENV": "testing"}


class TestLifecycle:
    """Tests for lazy loading, idempotence and reload"""

    def test_queries_load_lazily(self, make_env, memory_sink):
        loader = CountingLoader({"A": "1"})
        env = make_env(loader)

        assert not env.loaded
        assert loader.calls == 0
        assert memory_sink.values == {}

        assert env.has("A")
        assert env.loaded
        assert memory_sink.get("A") == "1"

    def test_load_twice_runs_pipeline_once(self, make_env):
        loader = CountingLoader({"A": "1"})
        env = make_env(loader)

        first = env.load().get()
        second = env.load().get()
        env.get("A")
        env.group("X")
        env.has("A")

        assert loader.calls == 1
        assert first == second

    def test_reload_runs_pipeline_again(self, make_env):
        loader = CountingLoader({"A": "1"})
        env = make_env(loader)
        env.load()
        env.reload()

        assert loader.calls == 2

    def test_reload_removes_keys_dropped_from_file(self, make_env, memory_sink, write_env):
        path = write_env(".env", "APP_ENV=testing\nAPP_EXTRA=x\n")
        env = make_env(name=path)
        assert env.has("APP_EXTRA")

        write_env(".env", "APP_ENV=testing\n")
        assert env.has("APP_EXTRA")  # no reload yet

        env.reload()

        assert not env.has("APP_EXTRA")
        assert env.get("APP_ENV") == "testing"
        assert memory_sink.get("APP_EXTRA") is None
        assert env.previous_keys == ["APP_ENV"]
        assert env.last_report.removed == ("APP_EXTRA",)

    def test_reload_defaults_are_committed_once(self, make_env, memory_sink, write_env):
        env = make_env(name=write_env(".env", "APP_ENV=testing\n"))
        env.load()

        env.reload({"APP_LOCALE": "en", "TIMEOUT": "30"})

        assert env.get("APP_LOCALE") == "en"
        assert env.group("APP") == {"APP_ENV": "testing", "APP_LOCALE": "en"}
        assert memory_sink.get("TIMEOUT") == "30"

        env.reload()

        assert not env.has("APP_LOCALE")
        assert memory_sink.get("APP_LOCALE") is None
        assert memory_sink.get("TIMEOUT") is None
        assert env.last_report.removed == ("APP_LOCALE", "TIMEOUT")

    def test_file_values_win_over_reload_defaults(self, make_env, write_env):
        env = make_env(name=write_env(".env", "APP_ENV=testing\n"), override=True)
        env.reload({"APP_ENV": "fallback"})
        assert env.get("APP_ENV") == "testing"

    def test_reload_defaults_keys_are_validated(self, make_env, memory_sink, write_env):
        env = make_env(name=write_env(".env", "APP_ENV=testing\n"))

        with pytest.raises(InvalidEnvKeyFormat) as exc_info:
            env.reload({"1BAD": "x"})

        assert exc_info.value.key == "1BAD"
        assert memory_sink.values == {}
        assert not env.loaded

    def test_independent_instances_clean_up_each_other(self, make_env, memory_sink, write_env):
        path = write_env(".env", "APP_ENV=testing\nAPP_EXTRA=x\n")
        make_env(name=path).load()
        assert memory_sink.get("APP_EXTRA") == "x"

        write_env(".env", "APP_ENV=testing\n")
        make_env(name=path).load()

        assert memory_sink.get("APP_EXTRA") is None
        assert memory_sink.get("APP_ENV") == "testing"

    def test_commits_to_os_environment_by_default(self, monkeypatch, envsync_settings, write_env):
        monkeypatch.setattr(os, "environ", {"PATH": "/bin"})
        path = write_env(".env", "APP_ENV=testing\n")

        Env(name=path, settings=envsync_settings).load()

        assert os.environ["PATH"] == "/bin"
        assert os.environ["APP_ENV"] == "testing"
        assert os.environ["__ENVSYNC_KEYS"] == "APP_ENV"


class TestFailures:
    """Errors propagate and nothing is committed"""

    @pytest.mark.parametrize("name, content, error", [
        ("file.unknownext", "A=1", MissingLoader),
        (".env", "APP_ENV=testing\n123=value", InvalidEnvKeyFormat),
        (".env", "APP_ENV=testing\nAPP_INVALID", InvalidEnvLine),
        ("env.json", '{"APP": {"ENV": "testing"', InvalidJson),
    ])
    def test_errors_propagate(self, make_env, write_env, name, content, error):
        env = make_env(name=write_env(name, content))

        with pytest.raises(error):
            env.load()

        assert not env.loaded

    def test_missing_named_file(self, make_env):
        with pytest.raises(PathNotFound):
            make_env(name="env.unknown").load()

    def test_no_commit_when_any_source_fails(self, make_env, memory_sink, write_env):
        good = write_env(".env", "FOO=bar\n")
        bad = write_env("env.json", "{ broken")

        with pytest.raises(InvalidJson):
            make_env(name=[good, bad]).load()

        assert memory_sink.values == {}

    def test_failed_reload_keeps_previous_environment(self, make_env, memory_sink, write_env):
        path = write_env(".env", "FOO=bar\n")
        env = make_env(name=path)
        env.load()

        write_env(".env", "BROKEN\n")
        with pytest.raises(InvalidEnvLine):
            env.reload()

        assert memory_sink.get("FOO") == "bar"
        assert not env.loaded

    def test_safe_load_returns_empty_on_error(self, make_env, write_env):
        env = make_env(name=write_env("env.txt", "APP_TEST=true"))
        assert env.safe_load() == {}

    def test_safe_load_returns_values(self, make_env, write_env):
        env = make_env(name=write_env(".env", "FOO=bar\n"))
        assert env.safe_load() == {"FOO": "bar"}


class TestDiscovery:
    """Default-file discovery and its precedence against explicit files"""

    def test_discovers_default_names_in_order(self, make_env, write_env):
        write_env(".env", "APP_ENV=dev\nAPP_DEBUG=true\n")
        write_env(".env.local", "APP_ENV=local\nLOCAL_ONLY=1\n")

        env = make_env(discover=True)

        assert env.get("APP_ENV") == "dev"
        assert env.get("LOCAL_ONLY") == "1"
        assert make_env(discover=True, override=True).get("APP_ENV") == "local"

    def test_explicit_file_beats_discovered(self, make_env, write_env):
        write_env(".env", "APP_ENV=dev\nAPP_DEBUG=true\n")
        explicit = write_env("explicit.env", "APP_ENV=prod\n")

        env = make_env(name=explicit, discover=True)
        assert env.get("APP_ENV") == "prod"
        assert env.get("APP_DEBUG") == "true"

        env = make_env(name=explicit, discover=True, override=True)
        assert env.get("APP_ENV") == "prod"

    def test_nothing_to_discover(self, make_env):
        assert make_env(discover=True).get() == {}

    def test_discovery_list_from_settings(self, memory_sink, env_dir, write_env):
        write_env(".env.test", "FOO=bar\n")
        settings = Settings(base_path=env_dir, discovery_files=(".env.test",))

        assert Env(discover=True, sink=memory_sink, settings=settings).get("FOO") == "bar"
