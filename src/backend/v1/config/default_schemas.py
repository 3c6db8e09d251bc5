"""Default JSON schemas for record types, served to the record forms."""

from __future__ import annotations

import copy
from typing import Any

DEFAULT_SCHEMAS: dict[str, dict[str, Any]] = {
    "accounts": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "title": "ID", "readOnly": True},
            "name": {"type": "string", "title": "Name"},
            "code": {"type": "string", "title": "Code"},
            "description": {"type": "string", "title": "Description"},
            "classification": {
                "type": "string",
                "title": "Classification",
                "enum": ["Asset", "Liability", "Equity", "Revenue", "Expense"],
            },
            "type": {"type": "string", "title": "Type"},
            "status": {
                "type": "string",
                "title": "Status",
                "enum": ["Active", "Inactive", "Archived"],
            },
            "currentBalance": {"type": "number", "title": "Current Balance"},
            "currency": {"type": "string", "title": "Currency"},
            "taxRateId": {"type": "string", "title": "Tax Rate ID"},
            "companyId": {"type": "string", "title": "Company ID"},
            "createdTime": {
                "type": "string",
                "title": "Created Time",
                "format": "date-time",
                "readOnly": True,
            },
            "createdBy": {"type": "string", "title": "Created By", "readOnly": True},
            "updatedTime": {
                "type": "string",
                "title": "Updated Time",
                "format": "date-time",
                "readOnly": True,
            },
            "updatedBy": {"type": "string", "title": "Updated By", "readOnly": True},
        },
        "required": ["id", "name"],
    },
}


def get_default_schema(schema_key: str) -> dict[str, Any] | None:
    schema = DEFAULT_SCHEMAS.get(schema_key)
    return copy.deepcopy(schema) if schema is not None else None


def to_form_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Strip `id` and read-only properties so the schema can drive a create form."""

    form_schema = copy.deepcopy(schema)
    properties = form_schema.get("properties")
    if isinstance(properties, dict):
        form_schema["properties"] = {
            key: value
            for key, value in properties.items()
            if key != "id" and not (isinstance(value, dict) and value.get("readOnly"))
        }
    required = form_schema.get("required")
    if isinstance(required, list):
        form_schema["required"] = [r for r in required if r in form_schema.get("properties", {})]
    return form_schema
