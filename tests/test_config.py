import json
import logging

import httpx
import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from usercrud.app import create_app
from usercrud.cli import main as cli
from usercrud.config import Settings, get_settings
from usercrud.observability import JSONFormatter, setup_logging
from usercrud.types import MAX_PAGE_SIZE


class TestSettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("USERCRUD_PORT", "8080")
        monkeypatch.setenv("USERCRUD_API_PREFIX", "api/")
        monkeypatch.setenv("USERCRUD_DEFAULT_PAGE_SIZE", "500")
        settings = Settings()
        assert settings.port == 8080
        assert settings.api_prefix == "/api"
        assert settings.default_page_size == MAX_PAGE_SIZE

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_api_prefix_is_applied(self):
        client = TestClient(create_app(Settings(api_prefix="/api")))
        response = client.post("/api/users", json={"login": "abc"})
        assert response.status_code == 201
        assert "/api/users/" in response.headers["location"]
        assert client.get("/users").status_code == 404

    def test_default_page_size_is_applied(self):
        client = TestClient(create_app(Settings(default_page_size=3)))
        for i in range(5):
            client.post("/users", json={"login": f"user{i}"})
        assert len(client.get("/users").json()) == 3


class TestLogging:
    def test_setup_logging_replaces_its_handler(self):
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        root = logging.getLogger()
        handlers = [h for h in root.handlers if h.get_name() == "usercrud"]
        assert len(handlers) == 1
        assert root.level == logging.WARNING

    def test_json_formatter(self):
        record = logging.LogRecord("usercrud.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.path = "/users"
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["path"] == "/users"


class TestCli:
    def test_list(self, monkeypatch: pytest.MonkeyPatch):
        pagination = {
            "previousLink": None,
            "nextLink": None,
            "totalCount": 1,
            "pageSize": 10,
            "currentPage": 1,
            "totalPages": 1,
        }

        def fake_get(url, params=None, headers=None):
            assert url == "http://api.test/users"
            assert params == {"pageNumber": 1, "pageSize": 10}
            return httpx.Response(
                200,
                json=[{"id": "1", "login": "abc123", "fullName": "Doe John"}],
                headers={"X-Pagination": json.dumps(pagination)},
                request=httpx.Request("GET", url),
            )

        monkeypatch.setattr(cli.httpx, "get", fake_get)
        result = CliRunner().invoke(cli.app, ["list", "--url", "http://api.test"])
        assert result.exit_code == 0, result.output
        assert "abc123" in result.output

    def test_create_validation_error(self, monkeypatch: pytest.MonkeyPatch):
        def fake_post(url, json=None, headers=None):
            return httpx.Response(
                422,
                json={"detail": {"Login": ["Login should contain only letters or digits"]}},
                request=httpx.Request("POST", url),
            )

        monkeypatch.setattr(cli.httpx, "post", fake_post)
        result = CliRunner().invoke(
            cli.app, ["create", "--login", "bad login", "--url", "http://api.test"]
        )
        assert result.exit_code == 1
        assert "Login" in result.output
