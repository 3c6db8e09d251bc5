"""Integration.app connector.

Purpose
- Provide a small, testable wrapper for the Integration.app REST API calls the
  records backend needs: listing a customer's connections and running a named
  action on one of them.
- Keep customer token minting in one place.

This module is intentionally independent of FastAPI.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import jwt
import requests

from src.backend.common.config.app_config import config
from src.backend.common.models.records import Connection

logger = logging.getLogger(__name__)


class IntegrationAppError(Exception):
    """A failed Integration.app API call.

    `data` is the decoded JSON error body as returned by the platform
    (`{type, key, message, data: <vendor payload>}`), or None when the body
    was not JSON.
    """

    def __init__(
        self,
        message: str,
        *,
        data: Any = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.data = data
        self.status_code = status_code


class ActionRunner:
    def __init__(self, client: "IntegrationAppClient", connection_id: str, action_key: str) -> None:
        self._client = client
        self._connection_id = connection_id
        self._action_key = action_key

    def run(self, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        return self._client.run_action(
            connection_id=self._connection_id,
            action_key=self._action_key,
            payload=payload or {},
        )


class ConnectionAccessor:
    def __init__(self, client: "IntegrationAppClient", connection_id: str) -> None:
        self._client = client
        self.connection_id = connection_id

    def action(self, action_key: str) -> ActionRunner:
        return ActionRunner(self._client, self.connection_id, action_key)


class ConnectionsAccessor:
    def __init__(self, client: "IntegrationAppClient") -> None:
        self._client = client

    def find(self) -> list[Connection]:
        return self._client.find_connections()


class IntegrationAppClient:
    def __init__(
        self,
        *,
        access_token: str,
        api_uri: str = "https://api.integration.app",
        timeout_seconds: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self._access_token = access_token
        self._api_uri = api_uri.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self.connections = ConnectionsAccessor(self)

    @staticmethod
    def generate_customer_token(
        *,
        workspace_key: str,
        workspace_secret: str,
        customer_id: str,
        customer_name: str | None = None,
        ttl_seconds: int = 7200,
    ) -> str:
        """Mint a customer access token (HS512 JWT signed with the workspace secret)."""

        now = int(time.time())
        claims: dict[str, Any] = {
            "id": customer_id,
            "name": customer_name or customer_id,
            "iss": workspace_key,
            "iat": now,
            "exp": now + int(ttl_seconds),
        }
        return jwt.encode(claims, workspace_secret, algorithm="HS512")

    @classmethod
    def for_customer(
        cls,
        *,
        customer_id: str,
        customer_name: str | None = None,
        session: requests.Session | None = None,
    ) -> "IntegrationAppClient":
        workspace_key, workspace_secret = config.integration_app_credentials()
        token = cls.generate_customer_token(
            workspace_key=workspace_key,
            workspace_secret=workspace_secret,
            customer_id=customer_id,
            customer_name=customer_name,
            ttl_seconds=config.INTEGRATION_APP_TOKEN_TTL_SECONDS,
        )
        return cls(
            access_token=token,
            api_uri=config.INTEGRATION_APP_API_URI,
            timeout_seconds=config.INTEGRATION_APP_HTTP_TIMEOUT_SECONDS,
            session=session,
        )

    def connection(self, connection_id: str) -> ConnectionAccessor:
        return ConnectionAccessor(self, connection_id)

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._api_uri}{path}"
        resp = self._session.request(
            method,
            url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            },
            json=json_body,
            timeout=self._timeout_seconds,
        )
        logger.debug("Integration.app %s %s -> %s", method, url, resp.status_code)

        if resp.status_code >= 400:
            raise self._error_from_response(resp)
        if not resp.content:
            return {}
        return resp.json()

    @staticmethod
    def _error_from_response(resp: requests.Response) -> IntegrationAppError:
        try:
            body = resp.json()
        except ValueError:
            body = None

        message = None
        if isinstance(body, dict):
            message = body.get("message")
        if not message:
            message = f"HTTP {resp.status_code}: {resp.text}"
        return IntegrationAppError(str(message), data=body, status_code=resp.status_code)

    def find_connections(self) -> list[Connection]:
        resp = self._request_json("GET", "/connections")
        items = resp.get("items") if isinstance(resp, dict) else None
        if not isinstance(items, list):
            return []
        return [Connection.model_validate(item) for item in items if isinstance(item, dict)]

    def run_action(
        self,
        *,
        connection_id: str,
        action_key: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Run a named action on a connection; returns the `{output, ...}` envelope."""

        logger.info(f"Running action '{action_key}' on connection {connection_id}")
        resp = self._request_json(
            "POST",
            f"/connections/{connection_id}/actions/{action_key}/run",
            json_body=payload,
        )
        return resp if isinstance(resp, dict) else {"output": resp}
