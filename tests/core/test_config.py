"""Tests for configuration"""
from blueprint.core.config import Config


class TestConfig:
    def test_defaults(self):
        settings = Config(_env_file=None)

        assert settings.items_queue_name == "items-events"
        assert settings.worker_max_concurrent_calls == 5
        assert settings.worker_shutdown_timeout == 30.0
        assert settings.max_delivery_count == 10

    def test_cors_origins_split_on_semicolon(self):
        settings = Config(_env_file=None, allowed_origins="https://a.example.com; https://b.example.com;")

        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_authority_derived_urls(self):
        settings = Config(_env_file=None, auth_authority="https://idp.example.com/realms/blueprint/")

        assert settings.jwks_url == "https://idp.example.com/realms/blueprint/protocol/openid-connect/certs"
        assert settings.authorization_url == "https://idp.example.com/realms/blueprint/protocol/openid-connect/auth"
        assert settings.token_url == "https://idp.example.com/realms/blueprint/protocol/openid-connect/token"

    def test_dead_letter_queue_name(self):
        assert Config(_env_file=None, items_queue_name="orders").dead_letter_queue_name == "orders.dead-letter"
