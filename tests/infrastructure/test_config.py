"""Tests for environment-driven settings."""

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from pos.infrastructure.config import load_settings, parse_log_level, parse_utc_offset


class TestParseUtcOffset:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("+00:00", timedelta(0)),
            ("Z", timedelta(0)),
            ("-06:00", timedelta(hours=-6)),
            ("+0530", timedelta(hours=5, minutes=30)),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_utc_offset(raw) == expected

    @pytest.mark.parametrize("raw", ["6", "+6:00", "+25:00", "tomorrow"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError, match="POS_UTC_OFFSET"):
            parse_utc_offset(raw)


class TestParseLogLevel:

    def test_known_level(self):
        assert parse_log_level("debug") == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="POS_LOG_LEVEL"):
            parse_log_level("chatty")


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({})
        assert settings.data_dir.name == "data"
        assert settings.utc_offset == timedelta(0)
        assert settings.sale_prefix == "KFE-"
        assert settings.log_level == logging.WARNING

    def test_from_environment(self, tmp_path):
        settings = load_settings(
            {
                "POS_DATA_DIR": str(tmp_path),
                "POS_UTC_OFFSET": "-06:00",
                "POS_SALE_PREFIX": "TDA-",
                "POS_LOG_LEVEL": "INFO",
            }
        )
        assert settings.data_dir == Path(tmp_path)
        assert settings.store_path == Path(tmp_path) / "store.json"
        assert settings.utc_offset == timedelta(hours=-6)
        assert settings.sale_prefix == "TDA-"
        assert settings.log_level == logging.INFO

    def test_blank_prefix_rejected(self):
        with pytest.raises(ValueError, match="POS_SALE_PREFIX"):
            load_settings({"POS_SALE_PREFIX": "  "})
