"""
Record, connection and API payload models.

Field names on the wire are camelCase (`integrationKey`, `customerId`,
`errorData`); attributes are snake_case with aliases.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Domain Models
# ---------------------------------------------------------------------------

class Record(BaseModel):
    """Local mirror of a domain entity held in an external system."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    customer_id: str = Field(alias="customerId")
    record_type: str = Field(default="get-accounts", alias="recordType")
    fields: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_default(cls, value: Any) -> Any:
        # Older documents may hold an explicit null.
        return {} if value is None else value

    @property
    def external_id(self) -> str:
        """Identifier understood by the remote system.

        `fields.ExternalId` wins when present and non-empty; otherwise the
        local id doubles as the external one.
        """
        external = (self.fields or {}).get("ExternalId")
        return str(external) if external else self.id

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class IntegrationRef(BaseModel):
    key: Optional[str] = None
    name: Optional[str] = None


class Connection(BaseModel):
    """A customer's authorized link to one external integration."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    integration: Optional[IntegrationRef] = None

    @property
    def integration_key(self) -> Optional[str]:
        return self.integration.key if self.integration else None


class ConnectedIntegration(BaseModel):
    """Summary row for the integration picker on record forms."""
    model_config = ConfigDict(populate_by_name=True)

    key: str
    name: Optional[str] = None
    connection_id: str = Field(alias="connectionId")


class RecordAction(BaseModel):
    """Entry in the configured record action registry."""
    key: str
    name: str
    type: str = "default"
    schema_key: Optional[str] = None


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class RecordCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    integration_key: str = Field(alias="integrationKey")
    fields: Dict[str, Any]


class RecordUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    integration_key: str = Field(alias="integrationKey")
    id: str
    fields: Dict[str, Any]


class RecordDeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    integration_key: str = Field(alias="integrationKey")


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class RecordDataResponse(BaseModel):
    success: bool = True
    data: Any = None


class RecordListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]] = Field(default_factory=list)


class RecordDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Record deleted successfully"


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    error_data: Any = Field(default=None, alias="errorData")

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.error_data is not None:
            body["errorData"] = self.error_data
        return body
