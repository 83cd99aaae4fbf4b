import logging

import pytest

from report_issue.config import configure_logging, load_settings
from report_issue.utils import env_bool, env_int, env_str

_VARS = [
    "REPORT_ISSUE_NAME",
    "REPORT_ISSUE_PANEL_ID",
    "REPORT_ISSUE_SERVICE_URL",
    "REPORT_ISSUE_ALLOW_INSECURE_HTTPS",
    "REPORT_ISSUE_SHOW_ALERT",
    "REPORT_ISSUE_WAITING_TEXT",
    "REPORT_ISSUE_FORM_PATH",
    "REPORT_ISSUE_DEVICE_HOST",
    "REPORT_ISSUE_DEVICE_USERNAME",
    "REPORT_ISSUE_DEVICE_PASSWORD",
    "REPORT_ISSUE_DEVICE_VERIFY_TLS",
    "REPORT_ISSUE_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores "unset" even if a .env file sets them.
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    settings = load_settings(env_dir=tmp_path)

    assert settings.name == "Report Issue"
    assert settings.panel_id == "feedback"
    assert settings.service_url == ""
    assert settings.allow_insecure_https is False
    assert settings.show_alert is True
    assert settings.waiting_text == "Sending Feedback"
    assert settings.form_path is None
    assert settings.device_verify_tls is True
    assert settings.log_level == "INFO"


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("REPORT_ISSUE_PANEL_ID", "helpdesk")
    clean_env.setenv("REPORT_ISSUE_SERVICE_URL", "https://hooks.example.test/feedback")
    clean_env.setenv("REPORT_ISSUE_ALLOW_INSECURE_HTTPS", "true")
    clean_env.setenv("REPORT_ISSUE_SHOW_ALERT", "0")
    clean_env.setenv("REPORT_ISSUE_LOG_LEVEL", "debug")

    settings = load_settings(env_dir=tmp_path)

    assert settings.panel_id == "helpdesk"
    assert settings.service_url == "https://hooks.example.test/feedback"
    assert settings.allow_insecure_https is True
    assert settings.show_alert is False
    assert settings.log_level == "DEBUG"


def test_dotenv_files_fill_gaps_without_overriding(clean_env, tmp_path):
    (tmp_path / ".env").write_text("REPORT_ISSUE_NAME=Help Desk\nREPORT_ISSUE_PANEL_ID=from-dotenv\n", encoding="utf-8")
    (tmp_path / ".env.local").write_text("REPORT_ISSUE_DEVICE_HOST=10.0.0.5\n", encoding="utf-8")
    clean_env.setenv("REPORT_ISSUE_PANEL_ID", "from-env")

    settings = load_settings(env_dir=tmp_path)

    assert settings.name == "Help Desk"
    assert settings.panel_id == "from-env"
    assert settings.device_host == "10.0.0.5"


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("RI_FLAG", " Yes ")
    monkeypatch.setenv("RI_NUM", "12")
    monkeypatch.setenv("RI_BAD_NUM", "twelve")
    monkeypatch.setenv("RI_BLANK", "  ")

    assert env_bool("RI_FLAG") is True
    assert env_bool("RI_BLANK", default=True) is True
    assert env_bool("RI_MISSING") is False
    assert env_int("RI_NUM", 4) == 12
    assert env_int("RI_BAD_NUM", 4) == 4
    assert env_str("RI_BLANK", "fallback") == "fallback"


def test_configure_logging_quiets_httpx():
    configure_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
