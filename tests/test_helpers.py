import pytest

from buildplan import ConfigurationError, env


def test_env_reads_value(monkeypatch):
    monkeypatch.setenv("ANDROID_BUILD_BASE", "/tmp/out")
    assert env("ANDROID_BUILD_BASE", default="../../build") == "/tmp/out"


def test_env_default(monkeypatch):
    monkeypatch.delenv("ANDROID_BUILD_BASE", raising=False)
    assert env("ANDROID_BUILD_BASE", default="../../build") == "../../build"


def test_env_missing_without_default(monkeypatch):
    monkeypatch.delenv("ANDROID_BUILD_BASE", raising=False)
    with pytest.raises(ConfigurationError, match="ANDROID_BUILD_BASE"):
        env("ANDROID_BUILD_BASE")


def test_env_empty_value_counts_as_set(monkeypatch):
    monkeypatch.setenv("ANDROID_BUILD_BASE", "")
    assert env("ANDROID_BUILD_BASE", default="../../build") == ""
