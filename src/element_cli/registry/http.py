"""
HTTP Registry Client

Talks to the block registry REST API with httpx. Failures are normalized into
``RegistryError`` with the registry's own ``code``/``message`` preserved.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from element_cli.config import ElementConfig
from element_cli.domain.errors import RegistryError
from element_cli.models import BlockIdentity, RegistryResponse

logger = logging.getLogger(__name__)


class HttpRegistryClient:
    """Registry client over a synchronous ``httpx.Client``

    Args:
        config: Registry URL, token and timeout
        transport: Optional transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self, config: ElementConfig, transport: httpx.BaseTransport | None = None
    ) -> None:
        headers = {"Accept": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = httpx.Client(
            base_url=config.registry_url.rstrip("/"),
            headers=headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpRegistryClient":
        return self

    def __exit__(self, exc_type: Any, exc: Any, traceback_obj: Any) -> None:
        del exc_type, exc, traceback_obj
        self.close()

    def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise RegistryError(
                message=f"Could not reach block registry: {exc}",
                code="network_error",
            ) from exc
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> RegistryResponse:
        response = self._send(method, path, payload)
        if response.is_error:
            raise _error_from_response(response)
        try:
            return RegistryResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RegistryError(
                message=f"Unexpected registry response for {method} {path}: {exc}",
                code="invalid_response",
                status_code=response.status_code,
            ) from exc

    def create(self, identity: BlockIdentity, code: str, category: str) -> RegistryResponse:
        return self._request(
            "POST",
            "/blocks",
            {
                "displayName": identity.display_name,
                "publishedName": identity.published_name,
                "code": code,
                "category": category,
            },
        )

    def update(
        self,
        identity: BlockIdentity,
        code: str,
        block_id: str,
        is_public: bool,
        version: int,
    ) -> RegistryResponse:
        return self._request(
            "PUT",
            f"/blocks/{block_id}",
            {
                "displayName": identity.display_name,
                "publishedName": identity.published_name,
                "code": code,
                "isPublic": is_public,
                "version": version,
            },
        )

    def release(self, block_id: str, note: str, version: int) -> RegistryResponse:
        return self._request(
            "POST", f"/blocks/{block_id}/release", {"note": note, "version": version}
        )

    def rollback(self, block_id: str, version: int) -> RegistryResponse:
        return self._request("POST", f"/blocks/{block_id}/rollback", {"version": version})

    def create_major_version(self, code: str, block_id: str, version: int) -> RegistryResponse:
        return self._request(
            "POST", f"/blocks/{block_id}/versions", {"code": code, "version": version}
        )

    def version_exists(self, block_id: str, version: int) -> bool:
        response = self._send("GET", f"/blocks/{block_id}/versions/{version}")
        if response.status_code == 404:
            return False
        if response.is_error:
            raise _error_from_response(response)
        return True


def _error_from_response(response: httpx.Response) -> RegistryError:
    """Build a RegistryError keeping the registry's error body intact"""
    body: Any
    try:
        body = response.json()
    except ValueError:
        body = None

    code = f"http_{response.status_code}"
    message = response.text or response.reason_phrase
    details: dict[str, Any] = {}
    if isinstance(body, dict):
        details = body
        code = str(body.get("code") or code)
        message = str(body.get("message") or message)

    return RegistryError(
        message=f"Registry request failed ({response.status_code}): {message}",
        code=code,
        data={"details": details} if details else {},
        status_code=response.status_code,
    )
