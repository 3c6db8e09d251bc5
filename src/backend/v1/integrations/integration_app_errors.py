"""Decoding helpers for failed Integration.app action runs.

The platform wraps whatever the vendor returned under `data`. QuickBooks
Online reports validation problems as

    {"Fault": {"Error": [{"Message": "...", "Detail": "...", "code": "..."}]}}

so a QBO failure arrives as `error.data == {..., "data": {"Fault": ...}}`.
Every level is checked for shape; anything unexpected means "no fault".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.backend.v1.integrations.integration_app_client import IntegrationAppError


@dataclass(frozen=True, slots=True)
class VendorFault:
    message: str
    detail: str | None = None
    code: str | None = None


@dataclass(frozen=True, slots=True)
class ActionErrorDescription:
    message: str
    error_data: Any = None
    vendor_fault: VendorFault | None = None


def extract_vendor_fault(error_data: Any) -> VendorFault | None:
    """Return the first vendor fault in an Integration.app error payload, if any."""

    if not isinstance(error_data, dict):
        return None
    inner = error_data.get("data")
    if not isinstance(inner, dict):
        return None
    fault = inner.get("Fault")
    if not isinstance(fault, dict):
        return None
    errors = fault.get("Error")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if not isinstance(first, dict):
        return None
    message = first.get("Message")
    if not isinstance(message, str) or not message:
        return None

    detail = first.get("Detail")
    code = first.get("code")
    return VendorFault(
        message=message,
        detail=detail if isinstance(detail, str) else None,
        code=str(code) if code is not None else None,
    )


def describe_action_error(exc: BaseException, *, default_message: str) -> ActionErrorDescription:
    """Pick the user-facing message (and raw payload) for a failed action run.

    - Integration.app error with a vendor fault: the fault message.
    - Any other error: its own message, falling back to `default_message`.

    An Integration.app error body, when there is one, is passed through
    unchanged as `error_data` whether or not it carries a vendor fault.
    """

    error_data = exc.data if isinstance(exc, IntegrationAppError) else None
    fault = extract_vendor_fault(error_data) if error_data is not None else None
    if fault is not None:
        return ActionErrorDescription(message=fault.message, error_data=error_data, vendor_fault=fault)

    message = getattr(exc, "message", None) or str(exc) or default_message
    return ActionErrorDescription(message=message, error_data=error_data)
