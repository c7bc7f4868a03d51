"""Tests for configuration loading."""

import dataclasses

from dateutil import tz

from src import config

_ENV_KEYS = (
    "GOOGLE_CREDENTIALS_FILE",
    "SPREADSHEET_ID",
    "SHEET_RANGE",
    "LINE_USER_ID",
    "LINE_BEARER_TOKEN",
    "HOME_TIMEZONE",
)


def test_from_env_defaults():
    cfg = config.Config.from_env({})
    assert cfg.credentials_file == "credentials.json"
    assert cfg.spreadsheet_id is None
    assert cfg.sheet_range == "シート1!A:E"
    assert cfg.home_timezone == "Asia/Tokyo"
    assert cfg.missing_settings() == [
        "SPREADSHEET_ID",
        "LINE_USER_ID",
        "LINE_BEARER_TOKEN",
    ]


def test_from_env_reads_values_and_ignores_blanks():
    cfg = config.Config.from_env(
        {
            "GOOGLE_CREDENTIALS_FILE": "/secrets/key.json",
            "SPREADSHEET_ID": "abc",
            "SHEET_RANGE": "  ",
            "LINE_USER_ID": "U1",
            "LINE_BEARER_TOKEN": "token",
            "HOME_TIMEZONE": "Europe/Berlin",
        }
    )
    assert cfg.credentials_file == "/secrets/key.json"
    assert cfg.spreadsheet_id == "abc"
    assert cfg.sheet_range == "シート1!A:E"
    assert cfg.line_user_id == "U1"
    assert cfg.line_bearer_token == "token"
    assert cfg.home_timezone == "Europe/Berlin"
    assert cfg.missing_settings() == []


def test_config_only_holds_handler_settings():
    # LOG_LEVEL is read by setup_logger, not carried on Config
    fields = {field.name for field in dataclasses.fields(config.Config)}
    assert "log_level" not in fields


def test_tzinfo_resolves_zone():
    cfg = config.Config(home_timezone="Asia/Tokyo")
    assert cfg.tzinfo() == tz.gettz("Asia/Tokyo")


def test_tzinfo_unknown_zone_falls_back_to_utc():
    cfg = config.Config(home_timezone="Nowhere/Atlantis")
    assert cfg.tzinfo() == tz.UTC


def test_load_config_reads_dotenv(monkeypatch, tmp_path):
    # load_dotenv writes to os.environ; setenv first so monkeypatch restores it
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "SPREADSHEET_ID=from-dotenv\nSHEET_RANGE=Log!A:E\n", encoding="utf-8"
    )

    cfg = config.load_config(str(env_file))
    assert cfg.spreadsheet_id == "from-dotenv"
    assert cfg.sheet_range == "Log!A:E"


def test_load_config_keeps_existing_environment(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("SPREADSHEET_ID=from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("SPREADSHEET_ID", "deployed")

    cfg = config.load_config(str(env_file))
    assert cfg.spreadsheet_id == "deployed"
