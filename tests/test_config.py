"""Broker config resolution tests."""

from decimal import Decimal

import pytest

from rabbit_mailer import config as settings


@pytest.fixture(autouse=True)
def _clear_rabbit_env(monkeypatch):
    for key in (
        "RABBITMQ_HOST",
        "RABBITMQ_MANAGEMENT_PORT",
        "RABBITMQ_USERNAME",
        "RABBITMQ_PASSWORD",
    ):
        monkeypatch.delenv(key, raising=False)


class TestGetConfig:
    def test_missing_key_returns_default(self):
        assert settings.get_config({}, "port", 15672) == 15672
        assert settings.get_config(None, "port", 15672) == 15672

    def test_none_value_returns_default(self):
        assert settings.get_config({"port": None}, "port", 15672) == 15672

    def test_int_and_str_pass_through(self):
        assert settings.get_config({"port": 5672}, "port", 15672) == 5672
        assert settings.get_config({"port": "abc"}, "port", 15672) == "abc"

    def test_other_values_coerced_to_int(self):
        assert settings.get_config({"port": Decimal("8080")}, "port", 15672) == 8080

    def test_uncoercible_value_degrades_to_default(self):
        assert settings.get_config({"port": 1.5}, "port", 15672) == 15672
        assert settings.get_config({"port": ["x"]}, "port", 15672) == 15672


class TestBuildRabbitConfig:
    def test_defaults(self):
        assert settings.build_rabbit_config({}) == {
            "host": "localhost",
            "port": 15672,
            "vhost": "email_service",
            "queue": "emails",
            "username": "guest",
            "password": "guest",
        }

    def test_environment_fallbacks(self, monkeypatch):
        monkeypatch.setenv("RABBITMQ_HOST", "broker.internal")
        monkeypatch.setenv("RABBITMQ_MANAGEMENT_PORT", "25672")
        monkeypatch.setenv("RABBITMQ_USERNAME", "svc")
        monkeypatch.setenv("RABBITMQ_PASSWORD", "pw")

        rabbit_config = settings.build_rabbit_config()

        assert rabbit_config["host"] == "broker.internal"
        assert rabbit_config["port"] == 25672
        assert rabbit_config["username"] == "svc"
        assert rabbit_config["password"] == "pw"

    def test_non_numeric_env_port_degrades_to_default(self, monkeypatch):
        monkeypatch.setenv("RABBITMQ_MANAGEMENT_PORT", "abc")
        assert settings.build_rabbit_config()["port"] == 15672

    def test_caller_config_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("RABBITMQ_HOST", "broker.internal")
        assert settings.build_rabbit_config({"host": "other"})["host"] == "other"

    def test_vhost_is_fixed(self):
        assert settings.build_rabbit_config({"vhost": "custom"})["vhost"] == "email_service"
