"""Record mutation flows (create / update / delete) and the read-only helpers
the record forms need.

Each flow is a straight line: validate, resolve the caller's connection for an
integration key, run one fixed remote action, translate the outcome.

Create and update only touch the remote system; delete also removes the local
mirror. That asymmetry is deliberate here (see DESIGN.md).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Protocol

from src.backend.common.exceptions import (
    ActionNotConfiguredError,
    ConnectionNotFoundError,
    RecordNotFoundError,
    RecordValidationError,
    RemoteActionError,
    SchemaNotFoundError,
)
from src.backend.common.models.records import (
    ConnectedIntegration,
    Connection,
    Record,
    RecordCreateRequest,
    RecordDeleteRequest,
    RecordUpdateRequest,
)
from src.backend.v1.config.default_schemas import get_default_schema, to_form_schema
from src.backend.v1.config.record_actions import (
    ACCOUNTS_RECORD_ACTION_KEY,
    CREATE_ACTION_KEY,
    DELETE_ACTION_KEY,
    UPDATE_ACTION_KEY,
    find_record_action,
)
from src.backend.v1.integrations.integration_app_errors import describe_action_error

logger = logging.getLogger(__name__)


class _RecordStore(Protocol):
    def find_one(self, record_id: str, customer_id: str) -> Record | None: ...

    def delete_one(self, record_id: str, customer_id: str) -> bool: ...

    def list_records(self, customer_id: str, record_type: str | None = None) -> list[Record]: ...


# ---------------------------------------------------------------------------
# Payload validation
# ---------------------------------------------------------------------------


def _require_text(value: Any, message: str, field: str) -> str:
    # Numeric ids are accepted; QBO ids are numeric strings.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or value == "":
        raise RecordValidationError(message, field=field)
    return value


def _require_fields(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise RecordValidationError("Fields are required", field="fields")
    return value


def parse_create_payload(payload: Any) -> RecordCreateRequest:
    body = payload if isinstance(payload, Mapping) else {}
    integration_key = _require_text(
        body.get("integrationKey"), "Integration key is required", "integrationKey"
    )
    fields = _require_fields(body.get("fields"))
    return RecordCreateRequest(integration_key=integration_key, fields=fields)


def parse_update_payload(payload: Any) -> RecordUpdateRequest:
    body = payload if isinstance(payload, Mapping) else {}
    integration_key = _require_text(
        body.get("integrationKey"), "Integration key is required", "integrationKey"
    )
    record_id = _require_text(body.get("id"), "Account ID is required", "id")
    fields = _require_fields(body.get("fields"))
    return RecordUpdateRequest(integration_key=integration_key, id=record_id, fields=fields)


def parse_delete_params(params: Mapping[str, Any]) -> RecordDeleteRequest:
    record_id = _require_text(params.get("id"), "Record ID is required", "id")
    integration_key = _require_text(
        params.get("integrationKey"), "Integration key is required", "integrationKey"
    )
    return RecordDeleteRequest(id=record_id, integration_key=integration_key)


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def resolve_connection(client: Any, integration_key: str) -> Connection:
    """Find the caller's connection whose integration key matches."""

    for connection in client.connections.find() or []:
        if connection.integration_key == integration_key:
            return connection
    raise ConnectionNotFoundError(integration_key)


def _run_action(
    client: Any,
    connection: Connection,
    action_key: str,
    payload: dict[str, Any],
    *,
    default_error: str,
) -> Any:
    try:
        result = client.connection(connection.id).action(action_key).run(payload)
    except Exception as e:
        described = describe_action_error(e, default_message=default_error)
        logger.error(f"Action '{action_key}' failed on connection {connection.id}: {described.message}")
        raise RemoteActionError(described.message, error_data=described.error_data) from e
    return (result or {}).get("output")


class RecordMutationService:
    """Runs record flows for one authenticated customer."""

    def __init__(
        self,
        *,
        customer_id: str,
        client: Any = None,
        client_factory: Callable[[], Any] | None = None,
        store: _RecordStore | None = None,
    ) -> None:
        self._customer_id = customer_id
        self._client = client
        self._client_factory = client_factory
        self._store = store

    def _get_client(self) -> Any:
        # Built on first use so local lookups fail fast without minting a token.
        if self._client is None:
            if self._client_factory is None:
                raise RuntimeError("RecordMutationService was created without an integration client")
            self._client = self._client_factory()
        return self._client

    def create_record(self, request: RecordCreateRequest) -> Any:
        connection = resolve_connection(self._get_client(), request.integration_key)

        if find_record_action(ACCOUNTS_RECORD_ACTION_KEY) is None:
            raise ActionNotConfiguredError(
                ACCOUNTS_RECORD_ACTION_KEY,
                message="Account action not found in configuration",
            )

        return _run_action(
            self._get_client(),
            connection,
            CREATE_ACTION_KEY,
            {"fields": request.fields},
            default_error="Failed to create account",
        )

    def update_record(self, request: RecordUpdateRequest) -> Any:
        connection = resolve_connection(self._get_client(), request.integration_key)
        return _run_action(
            self._get_client(),
            connection,
            UPDATE_ACTION_KEY,
            {"input": {"id": request.id, "fields": request.fields}},
            default_error="Failed to update account",
        )

    def delete_record(self, request: RecordDeleteRequest) -> None:
        store = self._require_store()
        record = store.find_one(request.id, self._customer_id)
        if record is None:
            raise RecordNotFoundError(request.id)

        connection = resolve_connection(self._get_client(), request.integration_key)
        external_id = record.external_id

        # Local consistency wins: a failed remote delete never blocks the local one.
        try:
            self._get_client().connection(connection.id).action(DELETE_ACTION_KEY).run({"id": external_id})
        except Exception as e:
            logger.warning(
                "Delete action failed for record %s (external id %s), continuing with local deletion: %s",
                request.id,
                external_id,
                e,
            )

        store.delete_one(request.id, self._customer_id)
        logger.info(f"Deleted record {request.id} for customer {self._customer_id}")

    def list_records(self, record_type: str | None = None) -> list[Record]:
        return self._require_store().list_records(self._customer_id, record_type)

    def list_connected_integrations(self) -> list[ConnectedIntegration]:
        connected: list[ConnectedIntegration] = []
        for connection in self._get_client().connections.find() or []:
            key = connection.integration_key
            if not key:
                continue
            connected.append(
                ConnectedIntegration(
                    key=key,
                    name=(connection.integration.name if connection.integration else None)
                    or connection.name,
                    connection_id=connection.id,
                )
            )
        return connected

    def _require_store(self) -> _RecordStore:
        if self._store is None:
            raise RuntimeError("RecordMutationService was created without a record store")
        return self._store


def get_record_schema(record_type: str, *, form: bool = False) -> dict[str, Any]:
    """Return the default schema for a record type (`get-accounts` or `accounts`)."""

    action = find_record_action(record_type)
    schema_key = (action.schema_key if action else None) or record_type
    schema = get_default_schema(schema_key)
    if schema is None:
        raise SchemaNotFoundError(record_type)
    return to_form_schema(schema) if form else schema
