"""Records API Router.

This module handles the record endpoints used by the records page and the
create/edit/delete forms:
- Create / update / delete a record through an integration connection
- List the caller's local records
- Serve the default form schema for a record type
- List the caller's connected integrations
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.backend.auth.auth_utils import AuthContext, require_auth
from src.backend.common.database.record_store import RecordStore
from src.backend.common.exceptions import RecordValidationError
from src.backend.common.models.records import (
    RecordDataResponse,
    RecordDeleteResponse,
    RecordListResponse,
)
from src.backend.v1.api.dependencies import (
    IntegrationClientFactory,
    get_integration_client_factory,
    get_record_store,
)
from src.backend.v1.api.error_handling import handle_record_errors
from src.backend.v1.use_cases.record_mutations import (
    RecordMutationService,
    get_record_schema,
    parse_create_payload,
    parse_delete_params,
    parse_update_payload,
)

logger = logging.getLogger(__name__)

records_router = APIRouter(prefix="/records", tags=["Records"])


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------


async def _read_json(request: Request):
    try:
        return await request.json()
    except Exception:
        raise RecordValidationError("Invalid JSON")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@records_router.post("/create")
@handle_record_errors("Failed to create account")
async def create_record(
    request: Request,
    auth: AuthContext = Depends(require_auth),
    client_factory: IntegrationClientFactory = Depends(get_integration_client_factory),
):
    """Create a record in the external system through the caller's connection."""
    body = parse_create_payload(await _read_json(request))

    service = RecordMutationService(customer_id=auth.customer_id, client_factory=lambda: client_factory(auth))
    output = service.create_record(body)

    logger.info(f"Created record via '{body.integration_key}' for customer {auth.customer_id}")
    return RecordDataResponse(data=output)


@records_router.put("/update")
@handle_record_errors("Failed to update account")
async def update_record(
    request: Request,
    auth: AuthContext = Depends(require_auth),
    client_factory: IntegrationClientFactory = Depends(get_integration_client_factory),
):
    """Update a record in the external system; `id` is the external identifier."""
    body = parse_update_payload(await _read_json(request))

    service = RecordMutationService(customer_id=auth.customer_id, client_factory=lambda: client_factory(auth))
    output = service.update_record(body)

    logger.info(f"Updated record {body.id} via '{body.integration_key}'")
    return RecordDataResponse(data=output)


@records_router.delete("/delete")
@handle_record_errors("Failed to delete record")
async def delete_record(
    record_id: Optional[str] = Query(None, alias="id"),
    integration_key: Optional[str] = Query(None, alias="integrationKey"),
    auth: AuthContext = Depends(require_auth),
    client_factory: IntegrationClientFactory = Depends(get_integration_client_factory),
    store: RecordStore = Depends(get_record_store),
):
    """Delete a record remotely (best effort) and locally (always, once found)."""
    params = parse_delete_params({"id": record_id, "integrationKey": integration_key})

    service = RecordMutationService(
        customer_id=auth.customer_id, client_factory=lambda: client_factory(auth), store=store
    )
    service.delete_record(params)

    return RecordDeleteResponse()


@records_router.get("")
@handle_record_errors("Failed to list records")
async def list_records(
    record_type: Optional[str] = Query(None, alias="recordType"),
    auth: AuthContext = Depends(require_auth),
    store: RecordStore = Depends(get_record_store),
):
    """List the caller's local records, optionally filtered by record type."""
    service = RecordMutationService(customer_id=auth.customer_id, store=store)
    records = service.list_records(record_type)
    return RecordListResponse(data=[r.to_document() for r in records])


@records_router.get("/schema")
@handle_record_errors("Failed to load form schema")
async def record_schema(
    record_type: str = Query("get-accounts", alias="recordType"),
    form: bool = Query(False),
    auth: AuthContext = Depends(require_auth),
):
    """Return the default JSON schema for a record type (form-ready when `form=true`)."""
    return RecordDataResponse(data=get_record_schema(record_type, form=form))


@records_router.get("/integrations")
@handle_record_errors("Failed to list integrations")
async def connected_integrations(
    auth: AuthContext = Depends(require_auth),
    client_factory: IntegrationClientFactory = Depends(get_integration_client_factory),
):
    """List integrations the caller has a connection for; the first is the default pick."""
    service = RecordMutationService(customer_id=auth.customer_id, client_factory=lambda: client_factory(auth))
    integrations = service.list_connected_integrations()
    return RecordDataResponse(data=[i.model_dump(by_alias=True) for i in integrations])
