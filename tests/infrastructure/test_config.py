"""Tests for environment settings, logging setup and wiring."""

import json
import os
from pathlib import Path

import pytest
import structlog

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import DocumentKind
from receipts.infrastructure import bootstrap
from receipts.infrastructure.config import Settings
from receipts.infrastructure.logs import configure_logging
from receipts.infrastructure.printing.device_bridge import DevicePrinterBridge
from receipts.infrastructure.printing.rawbt_bridge import RawBTBridge

_VARS = (
    "RECEIPTS_BUSINESS_NAME",
    "RECEIPTS_LINE_WIDTH",
    "RECEIPTS_CATALOG_PATH",
    "RECEIPTS_PRINTER_DEVICE",
    "RECEIPTS_RAWBT_ENABLED",
    "RECEIPTS_CARWASH_DISCOUNTS",
    "RECEIPTS_HTML_DIR",
    "RECEIPTS_LOG_LEVEL",
    "RECEIPTS_LOG_FORMAT",
)


@pytest.fixture
def env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, env):
        config = Settings.from_env(load_env_file=False)
        assert config.business_name == "ONEFAITH"
        assert config.line_width == 32
        assert config.printer_device == Path("/dev/usb/lp0")
        assert config.rawbt_enabled
        assert not config.carwash_discounts
        assert config.catalog_path.name == "catalog.json"

    def test_overrides(self, env, tmp_path):
        env.setenv("RECEIPTS_BUSINESS_NAME", "SUDS")
        env.setenv("RECEIPTS_LINE_WIDTH", "42")
        env.setenv("RECEIPTS_CATALOG_PATH", str(tmp_path / "c.json"))
        env.setenv("RECEIPTS_RAWBT_ENABLED", "no")
        env.setenv("RECEIPTS_CARWASH_DISCOUNTS", "TRUE")
        env.setenv("RECEIPTS_LOG_LEVEL", "debug")
        env.setenv("RECEIPTS_LOG_FORMAT", "Console")

        config = Settings.from_env(load_env_file=False)

        assert config.business_name == "SUDS"
        assert config.line_width == 42
        assert config.catalog_path == tmp_path / "c.json"
        assert not config.rawbt_enabled
        assert config.carwash_discounts
        assert config.log_level == "DEBUG"
        assert config.log_format == "console"

    def test_dotenv_file_in_working_directory(self, env, tmp_path):
        (tmp_path / ".env").write_text("RECEIPTS_BUSINESS_NAME=FROM_FILE\n", encoding="utf-8")
        env.chdir(tmp_path)
        try:
            assert Settings.from_env().business_name == "FROM_FILE"
        finally:
            os.environ.pop("RECEIPTS_BUSINESS_NAME", None)

    def test_environment_wins_over_dotenv_file(self, env, tmp_path):
        (tmp_path / ".env").write_text("RECEIPTS_BUSINESS_NAME=FROM_FILE\n", encoding="utf-8")
        env.chdir(tmp_path)
        env.setenv("RECEIPTS_BUSINESS_NAME", "FROM_ENV")
        assert Settings.from_env().business_name == "FROM_ENV"

    def test_bad_integer(self, env):
        env.setenv("RECEIPTS_LINE_WIDTH", "wide")
        with pytest.raises(ValidationError, match="must be an integer") as info:
            Settings.from_env(load_env_file=False)
        assert info.value.field == "RECEIPTS_LINE_WIDTH"

    def test_line_width_too_narrow(self, env):
        env.setenv("RECEIPTS_LINE_WIDTH", "8")
        with pytest.raises(ValidationError, match="at least 16"):
            Settings.from_env(load_env_file=False)

    def test_bad_boolean(self, env):
        env.setenv("RECEIPTS_RAWBT_ENABLED", "maybe")
        with pytest.raises(ValidationError, match="must be true or false"):
            Settings.from_env(load_env_file=False)

    def test_bad_log_level(self, env):
        env.setenv("RECEIPTS_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError, match="must be one of") as info:
            Settings.from_env(load_env_file=False)
        assert info.value.field == "RECEIPTS_LOG_LEVEL"

    def test_bad_log_format(self, env):
        env.setenv("RECEIPTS_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError, match="console, json") as info:
            Settings.from_env(load_env_file=False)
        assert info.value.field == "RECEIPTS_LOG_FORMAT"


class TestBootstrap:

    def test_encoder_uses_settings(self):
        encoder = bootstrap.encoder(Settings(line_width=40, business_name="SUDS"))
        assert encoder.line_width == 40
        assert encoder.business_name == "SUDS"

    def test_carwash_discount_switch(self):
        profiles = bootstrap.profiles(Settings(carwash_discounts=True))
        assert profiles[DocumentKind.CARWASH].allows_discount

    def test_bridges(self, tmp_path):
        config = Settings(printer_device=tmp_path / "lp0")
        assert isinstance(bootstrap.printer_bridge(config, "rawbt"), RawBTBridge)
        assert isinstance(bootstrap.printer_bridge(config, "device"), DevicePrinterBridge)

    def test_unknown_bridge(self):
        with pytest.raises(ValidationError, match="Unknown printer bridge 'usb'"):
            bootstrap.printer_bridge(Settings(), "usb")


class TestLogging:

    def test_json_lines_on_stderr(self, capsys):
        configure_logging("INFO", "json")
        structlog.get_logger().info("receipt_encoded", order_id="ORD-1")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip())
        assert event["event"] == "receipt_encoded"
        assert event["order_id"] == "ORD-1"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self, capsys):
        configure_logging("WARNING", "json")
        structlog.get_logger().info("hidden")
        structlog.get_logger().warning("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err
