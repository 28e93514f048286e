"""Tests for environment-driven settings."""
from pathlib import Path

import pytest

from docket_watch.config import load_settings
from docket_watch.errors import ConfigError


def test_load_settings_reads_key_and_cert_path() -> None:
    settings = load_settings({"API_KEY": " abc ", "CERT_PATH": "/etc/letsencrypt/live/example.org"})

    assert settings.api_key == "abc"
    assert settings.cert_file == Path("/etc/letsencrypt/live/example.org/fullchain.pem")
    assert settings.key_file == Path("/etc/letsencrypt/live/example.org/privkey.pem")


def test_missing_api_key() -> None:
    with pytest.raises(ConfigError, match="API_KEY"):
        load_settings({"CERT_PATH": "/certs"})


def test_cert_path_required_for_tls() -> None:
    with pytest.raises(ConfigError, match="CERT_PATH"):
        load_settings({"API_KEY": "abc"})


def test_cert_path_optional_without_tls() -> None:
    settings = load_settings({"API_KEY": "abc"}, require_tls=False)

    assert settings.cert_path is None
    with pytest.raises(ConfigError):
        _ = settings.cert_file
