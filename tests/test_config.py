# ──────────────────────────────────────────────────────────────────────────────
# File: tests/test_config.py
# ──────────────────────────────────────────────────────────────────────────────
import pytest

from leetcode_sync.config import REQUIRED_VARIABLES, Config
from leetcode_sync.errors import ConfigError

ENV = {
    "LEETCODE_SESSION_COOKIE": "session",
    "LEETCODE_CSRF_TOKEN": "csrf",
    "GITHUB_TOKEN": "token",
    "REPO_OWNER": "octocat",
    "REPO_NAME": "solutions",
}


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    # setenv first so teardown also removes values loaded from .env files
    for name in list(ENV) + ["REPO_BRANCH", "DEFAULT_LANGUAGE", "DEBUG", "DRY_RUN"]:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    path = tmp_path / ".env"
    path.write_text("")
    return path


def test_from_env_reads_required_values(env_file, monkeypatch):
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)

    config = Config.from_env(env_file=env_file)

    assert config.leetcode_session == "session"
    assert config.leetcode_csrf_token == "csrf"
    assert config.github_token == "token"
    assert config.repo_full_name == "octocat/solutions"
    assert config.branch == "main"
    assert config.default_language == "python"
    assert config.debug is False
    assert config.dry_run is False


def test_from_env_optional_overrides(env_file, monkeypatch):
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("REPO_BRANCH", "solutions")
    monkeypatch.setenv("DEFAULT_LANGUAGE", "cpp")
    monkeypatch.setenv("DRY_RUN", "TRUE")

    config = Config.from_env(env_file=env_file)

    assert config.branch == "solutions"
    assert config.default_language == "cpp"
    assert config.dry_run is True


def test_from_env_loads_dotenv_file(env_file):
    env_file.write_text("\n".join(f"{k}={v}" for k, v in ENV.items()))

    config = Config.from_env(env_file=env_file)

    assert config.repo_name == "solutions"


@pytest.mark.parametrize("missing", [name for name, _ in REQUIRED_VARIABLES])
def test_from_env_missing_required_value(env_file, monkeypatch, missing):
    for name, value in ENV.items():
        if name != missing:
            monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError) as exc:
        Config.from_env(env_file=env_file)

    assert missing in str(exc.value)
    assert isinstance(exc.value, ValueError)


def test_blank_value_counts_as_missing(env_file, monkeypatch):
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("GITHUB_TOKEN", "   ")

    with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
        Config.from_env(env_file=env_file)
