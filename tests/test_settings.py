"""Tests for central configuration settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config.settings import (
    AppSettings,
    BirdSettings,
    ParserSettings,
    RateLimitSettings,
    StatusSettings,
    get_settings,
)


def _clean_env(*prefixes):
    return {k: v for k, v in os.environ.items() if not k.startswith(prefixes)}


class TestBirdSettings:
    def test_defaults(self):
        with patch.dict(os.environ, _clean_env("BIRD_"), clear=True):
            settings = BirdSettings()
            assert settings.cmd == "birdc"
            assert settings.cache_ttl == 5
            assert settings.query_timeout == 30.0

    def test_env_override(self):
        with patch.dict(os.environ, {
            "BIRD_CMD": "/usr/sbin/birdc6",
            "BIRD_CACHE_TTL": "10",
            "BIRD_CONFIG_FILENAME": "/etc/bird6.conf",
        }, clear=False):
            settings = BirdSettings()
            assert settings.cmd == "/usr/sbin/birdc6"
            assert settings.cache_ttl_minutes == 10
            assert settings.config_filename == "/etc/bird6.conf"

    @pytest.mark.parametrize("ttl", [0, -3])
    def test_non_positive_ttl_uses_default(self, ttl):
        assert BirdSettings(cache_ttl=ttl).cache_ttl_minutes == 5


class TestParserAndStatusSettings:
    def test_per_peer_env(self):
        with patch.dict(os.environ, {
            "PER_PEER_TABLES": "true",
            "PEER_PROTOCOL_PREFIX": "PEER_",
            "PIPE_PROTOCOL_PREFIX": "PIPE_",
        }, clear=False):
            settings = ParserSettings()
            assert settings.per_peer_tables is True
            assert settings.peer_protocol_prefix == "PEER_"
            assert settings.pipe_protocol_prefix == "PIPE_"

    def test_filter_fields_from_json(self):
        with patch.dict(os.environ, {"FILTER_FIELDS": '["message", "router_id"]'}, clear=False):
            assert StatusSettings().filter_fields == ["message", "router_id"]

    def test_unknown_reconfig_source_rejected(self):
        with pytest.raises(ValidationError):
            StatusSettings(reconfig_timestamp_source="mtime")


class TestRateLimitSettings:
    def test_env_override(self):
        with patch.dict(os.environ, {
            "RATELIMIT_ENABLED": "1",
            "RATELIMIT_REQUESTS_PER_SECOND": "25",
        }, clear=False):
            settings = RateLimitSettings()
            assert settings.enabled is True
            assert settings.requests_per_second == 25

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            RateLimitSettings(requests_per_second=-1)


class TestAppSettings:
    def test_ip_version_validated(self):
        with pytest.raises(ValidationError):
            AppSettings(ip_version="5")

    def test_ip_version_6(self):
        assert AppSettings(ip_version="6").ip_version == "6"

    def test_nested_groups_initialized(self):
        s = AppSettings()
        assert s.bird is not None
        assert s.parser is not None
        assert s.status is not None
        assert s.rate_limit is not None


class TestGetSettings:
    def test_singleton(self):
        get_settings.cache_clear()
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2
        get_settings.cache_clear()

    def test_cache_clear_resets(self):
        get_settings.cache_clear()
        s1 = get_settings()
        get_settings.cache_clear()
        s2 = get_settings()
        assert s2 is not s1
        get_settings.cache_clear()
