"""Unit tests for the httpx registry client."""

import json

import httpx
import pytest

from element_cli.config import ElementConfig
from element_cli.domain.errors import RegistryError
from element_cli.models import BlockIdentity, ProductionState
from element_cli.registry.http import HttpRegistryClient

IDENTITY = BlockIdentity(display_name="Widget", published_name="widget")


def _client(handler, token: str | None = "tok") -> HttpRegistryClient:
    config = ElementConfig(registry_url="https://registry.test/api/", token=token)
    return HttpRegistryClient(config, transport=httpx.MockTransport(handler))


def test_create_posts_identity_and_code() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "abc123", "version": 1})

    with _client(handler) as client:
        response = client.create(IDENTITY, "code()", "layout")

    assert response.id == "abc123"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://registry.test/api/blocks"
    assert seen["auth"] == "Bearer tok"
    assert seen["body"] == {
        "displayName": "Widget",
        "publishedName": "widget",
        "code": "code()",
        "category": "layout",
    }


def test_update_puts_visibility_and_version() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "abc123"})

    with _client(handler) as client:
        client.update(IDENTITY, "code()", "abc123", True, 2)

    assert seen["method"] == "PUT"
    assert seen["path"] == "/api/blocks/abc123"
    assert seen["body"]["isPublic"] is True
    assert seen["body"]["version"] == 2


@pytest.mark.parametrize(
    ("call", "path", "body"),
    [
        (
            lambda c: c.release("abc123", "note", 1),
            "/api/blocks/abc123/release",
            {"note": "note", "version": 1},
        ),
        (lambda c: c.rollback("abc123", 1), "/api/blocks/abc123/rollback", {"version": 1}),
        (
            lambda c: c.create_major_version("code()", "abc123", 3),
            "/api/blocks/abc123/versions",
            {"code": "code()", "version": 3},
        ),
    ],
)
def test_version_operations_post_to_block_routes(call, path, body) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "abc123", "productionState": "released"})

    with _client(handler) as client:
        response = call(client)

    assert seen == {"path": path, "body": body}
    assert response.production_state == ProductionState.RELEASED


def test_version_exists_maps_404_to_false() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/versions/2"):
            return httpx.Response(200, json={"id": "abc123", "version": 2})
        return httpx.Response(404, json={"code": "not_found", "message": "no such version"})

    with _client(handler) as client:
        assert client.version_exists("abc123", 2) is True
        assert client.version_exists("abc123", 3) is False


def test_error_response_keeps_registry_code_and_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422, json={"code": "invalid_category", "message": "Category 'x' is not allowed"}
        )

    with _client(handler) as client:
        with pytest.raises(RegistryError) as exc_info:
            client.create(IDENTITY, "code()", "x")

    error = exc_info.value
    assert error.code == "invalid_category"
    assert "Category 'x' is not allowed" in error.message
    assert error.status_code == 422
    assert error.category == "validation"
    assert error.data["details"]["code"] == "invalid_category"


def test_unauthorized_without_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Unauthorized")

    with _client(handler, token=None) as client:
        with pytest.raises(RegistryError) as exc_info:
            client.rollback("abc123", 1)

    assert exc_info.value.code == "http_401"
    assert exc_info.value.category == "auth"


def test_transport_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(RegistryError) as exc_info:
            client.release("abc123", "note", 1)

    assert exc_info.value.code == "network_error"
    assert exc_info.value.status_code is None
    assert exc_info.value.category == "network"


def test_malformed_success_body_is_registry_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with _client(handler) as client:
        with pytest.raises(RegistryError) as exc_info:
            client.create(IDENTITY, "code()", "layout")

    assert exc_info.value.code == "invalid_response"
