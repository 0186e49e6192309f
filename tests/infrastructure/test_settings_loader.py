from __future__ import annotations

import pytest

from domain.redirect import RedirectPolicy
from domain.settings import BrowserSettings
from infrastructure.config.settings_loader import SettingsError, SettingsLoader


class TestFromMapping:
    def test_defaults_when_empty(self):
        assert SettingsLoader().from_mapping({}) == BrowserSettings()

    def test_types_coerced(self):
        settings = SettingsLoader().from_mapping(
            {
                "timeout_sec": "2.5",
                "max_redirects": "7",
                "ignore_errors": "yes",
                "verify_tls": "true",
                "redirect_policy": "ONLY_HOST",
                "encoding": "utf-8",
                "unknown": "ignored",
            }
        )

        assert settings.timeout_sec == 2.5
        assert settings.max_redirects == 7
        assert settings.ignore_errors is True
        assert settings.verify_tls is True
        assert settings.redirect_policy == RedirectPolicy.ONLY_HOST
        assert settings.encoding == "utf-8"

    @pytest.mark.parametrize(
        "data",
        [
            {"max_redirects": "many"},
            {"max_redirects": "-1"},
            {"ignore_errors": "maybe"},
            {"redirect_policy": "sometimes"},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(SettingsError):
            SettingsLoader().from_mapping(data)


def test_from_env_prefers_environment_over_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("BROWSER_MAX_REDIRECTS=3\nBROWSER_ENCODING=utf-8\nOTHER=1\n", encoding="utf-8")

    settings = SettingsLoader().from_env(env_file=env_file, environ={"BROWSER_MAX_REDIRECTS": "9"})

    assert settings.max_redirects == 9
    assert settings.encoding == "utf-8"


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("BROWSER_USER_AGENT", "scraper/1.0")

    assert SettingsLoader().from_env().user_agent == "scraper/1.0"


def test_from_yaml_browser_section(tmp_path):
    path = tmp_path / "browser.yaml"
    path.write_text(
        "browser:\n  redirect_policy: none\n  cookie_host_override: false\n  log_level: DEBUG\n",
        encoding="utf-8",
    )

    settings = SettingsLoader().from_yaml(str(path))

    assert settings.redirect_policy == RedirectPolicy.NONE
    assert settings.cookie_host_override is False
    assert settings.log_level == "DEBUG"


def test_from_yaml_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert SettingsLoader().from_yaml(str(path)) == BrowserSettings()


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(SettingsError, match="not found"):
        SettingsLoader().from_yaml(str(tmp_path / "nope.yaml"))


def test_from_yaml_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(SettingsError, match="invalid"):
        SettingsLoader().from_yaml(str(path))
