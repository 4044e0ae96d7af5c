"""Tests for client configuration and host resolution."""

import pytest

from nec_projector import NecProjectorError, DEFAULT_PORT, DEFAULT_TIMEOUT
from nec_projector.client import NecProjectorClientConfig, resolve_projector_tcp_host


def test_defaults_without_environment():
    config = NecProjectorClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT == 7142
    assert config.timeout_secs == DEFAULT_TIMEOUT
    assert config.stable_power_timeout_secs == 60.0


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("NEC_PROJECTOR_HOST", "projector.local")
    monkeypatch.setenv("NEC_PROJECTOR_PORT", "7000")
    monkeypatch.setenv("NEC_PROJECTOR_TIMEOUT", "5.5")
    config = NecProjectorClientConfig()
    assert config.default_host == "projector.local"
    assert config.default_port == 7000
    assert config.timeout_secs == 5.5


def test_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("NEC_PROJECTOR_HOST", "projector.local")
    config = NecProjectorClientConfig("10.0.0.5", default_port=7143, timeout_secs=1.0)
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 7143
    assert config.timeout_secs == 1.0


@pytest.mark.parametrize("name, value", [
    ("NEC_PROJECTOR_PORT", "seventy"),
    ("NEC_PROJECTOR_TIMEOUT", "soon"),
])
def test_invalid_environment_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(NecProjectorError):
        NecProjectorClientConfig()


def test_base_config_layering():
    base = NecProjectorClientConfig("10.0.0.5", default_port=7143, stable_power_timeout_secs=90.0)
    config = NecProjectorClientConfig(timeout_secs=3.0, base_config=base)
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 7143
    assert config.timeout_secs == 3.0
    assert config.stable_power_timeout_secs == 90.0
    assert base.timeout_secs == DEFAULT_TIMEOUT


def test_from_jsonable():
    config = NecProjectorClientConfig.from_jsonable(
        {"host": "10.0.0.9", "port": 7001, "timeout_secs": 4, "stable_power_timeout_secs": 30})
    assert config.default_host == "10.0.0.9"
    assert config.default_port == 7001
    assert config.timeout_secs == 4.0
    assert config.stable_power_timeout_secs == 30.0


def test_from_jsonable_missing_keys_use_base():
    base = NecProjectorClientConfig("10.0.0.5", timeout_secs=9.0)
    config = NecProjectorClientConfig.from_jsonable({"port": 7002}, base_config=base)
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 7002
    assert config.timeout_secs == 9.0


@pytest.mark.parametrize("jsonable", [
    {"host": 17},
    {"port": "7142"},
    {"timeout_secs": "2"},
    {"stable_power_timeout_secs": [60]},
])
def test_from_jsonable_rejects_bad_types(jsonable):
    with pytest.raises(NecProjectorError):
        NecProjectorClientConfig.from_jsonable(jsonable)


@pytest.mark.parametrize("host, default_port, expected", [
    ("10.0.0.5", None, ("10.0.0.5", 7142)),
    ("10.0.0.5", 7000, ("10.0.0.5", 7000)),
    ("10.0.0.5:7001", 7000, ("10.0.0.5", 7001)),
    ("tcp://projector.local", None, ("projector.local", 7142)),
    ("tcp://projector.local:7003", None, ("projector.local", 7003)),
])
def test_resolve_host(host, default_port, expected):
    assert resolve_projector_tcp_host(host, default_port) == expected


def test_resolve_host_from_environment(monkeypatch):
    monkeypatch.setenv("NEC_PROJECTOR_HOST", "projector.local")
    monkeypatch.setenv("NEC_PROJECTOR_PORT", "7010")
    assert resolve_projector_tcp_host() == ("projector.local", 7010)


@pytest.mark.parametrize("host", [None, "", "udp://projector.local", "projector.local:http", "tcp://:7142"])
def test_resolve_host_errors(host):
    with pytest.raises(NecProjectorError):
        resolve_projector_tcp_host(host)
