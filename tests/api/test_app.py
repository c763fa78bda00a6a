"""API tests for application wiring: OpenAPI security, docs exposure and CORS"""

import pytest
from fastapi.testclient import TestClient

from blueprint.core.config import Config
from blueprint.main import create_app


@pytest.fixture
def production_client():
    """Client for an app built with production settings; no lifespan needed"""
    settings = Config(
        _env_file=None,
        environment="production",
        allowed_origins="https://a.example.com; https://b.example.com",
    )
    return TestClient(create_app(settings))


class TestOpenApi:
    """Tests for the generated OpenAPI document"""

    def test_declares_authorization_code_flow(self, client):
        document = client.get("/openapi.json").json()

        flows = document["components"]["securitySchemes"]["OAuth2AuthorizationCodeBearer"]["flows"]
        assert flows["authorizationCode"]["authorizationUrl"].endswith("/protocol/openid-connect/auth")
        assert flows["authorizationCode"]["tokenUrl"].endswith("/protocol/openid-connect/token")

    def test_write_operations_require_the_scheme(self, client):
        paths = client.get("/openapi.json").json()["paths"]

        assert "OAuth2AuthorizationCodeBearer" in paths["/items"]["post"]["security"][0]
        assert "OAuth2AuthorizationCodeBearer" in paths["/items/{item_id}"]["delete"]["security"][0]

    def test_docs_are_served_in_development(self, client):
        assert client.get("/docs").status_code == 200

    def test_docs_are_hidden_outside_development(self, production_client):
        assert production_client.get("/docs").status_code == 404
        assert production_client.get("/openapi.json").status_code == 404


class TestCors:
    """Tests for cross-origin access"""

    def test_any_origin_in_development(self, client):
        response = client.get("/version", headers={"Origin": "https://anywhere.example.org"})

        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.parametrize("origin", ["https://a.example.com", "https://b.example.com"])
    def test_configured_origins_are_allowed(self, production_client, origin):
        response = production_client.get("/version", headers={"Origin": origin})

        assert response.headers["access-control-allow-origin"] == origin

    def test_other_origins_are_not_allowed(self, production_client):
        response = production_client.get("/version", headers={"Origin": "https://evil.example.net"})

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    def test_preflight_for_configured_origin(self, production_client):
        response = production_client.options(
            "/items",
            headers={
                "Origin": "https://a.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://a.example.com"
