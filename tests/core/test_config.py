from imgrights import config
from imgrights.utils import env_bool, parse_bool


def test_parse_bool_variants():
    assert parse_bool(True) is True
    assert parse_bool(0) is False
    assert parse_bool(" YES ") is True
    assert parse_bool("off") is False
    assert parse_bool("maybe", default=True) is True
    assert parse_bool(None) is False


def test_env_bool(monkeypatch):
    monkeypatch.delenv("IMGRIGHTS_TEST_FLAG", raising=False)
    assert env_bool("IMGRIGHTS_TEST_FLAG", True) is True
    monkeypatch.setenv("IMGRIGHTS_TEST_FLAG", "disabled")
    assert env_bool("IMGRIGHTS_TEST_FLAG", True) is False
    assert env_bool("", False) is False


def test_env_raw_picks_first_non_empty(monkeypatch):
    monkeypatch.setenv("IMGRIGHTS_A", "  ")
    monkeypatch.setenv("IMGRIGHTS_B", " /opt/exiftool ")
    assert config._env_raw("IMGRIGHTS_A", "IMGRIGHTS_B") == "/opt/exiftool"
    assert config._env_raw("IMGRIGHTS_MISSING", default="exiftool") == "exiftool"


def test_env_float_default_invalid_and_clamp(monkeypatch, caplog):
    monkeypatch.delenv("IMGRIGHTS_T", raising=False)
    assert config._env_float(30.0, "IMGRIGHTS_T", min_value=0.0, max_value=600.0) == 30.0

    monkeypatch.setenv("IMGRIGHTS_T", "abc")
    assert config._env_float(30.0, "IMGRIGHTS_T") == 30.0
    assert "Invalid float for IMGRIGHTS_T" in caplog.text

    monkeypatch.setenv("IMGRIGHTS_T", "9999")
    assert config._env_float(30.0, "IMGRIGHTS_T", min_value=0.0, max_value=600.0) == 600.0

    monkeypatch.setenv("IMGRIGHTS_T", "-1")
    assert config._env_float(30.0, "IMGRIGHTS_T", min_value=0.0, max_value=600.0) == 0.0


def test_env_bool_helper(monkeypatch):
    monkeypatch.delenv("IMGRIGHTS_C", raising=False)
    assert config._env_bool(True, "IMGRIGHTS_C") is True
    monkeypatch.setenv("IMGRIGHTS_C", "0")
    assert config._env_bool(True, "IMGRIGHTS_C") is False


def test_env_log_level(monkeypatch):
    monkeypatch.setenv("IMGRIGHTS_L", "debug")
    assert config._env_log_level("INFO", "IMGRIGHTS_L") == "DEBUG"
    monkeypatch.setenv("IMGRIGHTS_L", "chatty")
    assert config._env_log_level("INFO", "IMGRIGHTS_L") == "INFO"


def test_defaults_are_sane():
    assert config.EXIFTOOL_BIN
    assert 0.0 <= config.EXIFTOOL_TIMEOUT <= 600.0
    assert isinstance(config.COLOR_OUTPUT, bool)


def test_timeout_disabled_unless_configured(monkeypatch):
    from imgrights.adapters.tools import ExifTool

    monkeypatch.setattr(ExifTool, "_check_available", lambda self: True)
    assert config.DEFAULT_EXIFTOOL_TIMEOUT == 0.0
    assert ExifTool(timeout=config.DEFAULT_EXIFTOOL_TIMEOUT).timeout is None
    assert ExifTool(timeout=12.5).timeout == 12.5
