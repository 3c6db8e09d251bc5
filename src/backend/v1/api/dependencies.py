"""FastAPI dependencies for the record endpoints.

Both dependencies are overridable through `app.dependency_overrides` so tests
can swap in fakes for the remote client and the datastore.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import requests

from src.backend.auth.auth_utils import AuthContext
from src.backend.common.database.record_store import RecordStore, RecordStoreFactory
from src.backend.v1.integrations.integration_app_client import IntegrationAppClient

IntegrationClientFactory = Callable[[AuthContext], Any]

_http_session: Optional[requests.Session] = None


def _shared_session() -> requests.Session:
    global _http_session
    if _http_session is None:
        _http_session = requests.Session()
    return _http_session


def close_shared_session() -> None:
    global _http_session
    if _http_session is not None:
        _http_session.close()
        _http_session = None


def _build_integration_client(auth: AuthContext) -> IntegrationAppClient:
    return IntegrationAppClient.for_customer(
        customer_id=auth.customer_id or "",
        customer_name=auth.customer_name,
        session=_shared_session(),
    )


def get_integration_client_factory() -> IntegrationClientFactory:
    """Clients are built inside handlers, after payload validation has passed."""
    return _build_integration_client


def get_record_store() -> RecordStore:
    return RecordStoreFactory.get_store()
