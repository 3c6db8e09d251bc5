from __future__ import annotations

import pytest

from src.backend.common.exceptions import (
    ActionNotConfiguredError,
    ConnectionNotFoundError,
    RecordNotFoundError,
    RecordValidationError,
    RemoteActionError,
    SchemaNotFoundError,
)
from src.backend.common.models.records import Record
from src.backend.tests.fakes import QBO_CONNECTION, XERO_CONNECTION, FakeIntegrationClient
from src.backend.v1.integrations.integration_app_client import IntegrationAppError
from src.backend.v1.use_cases import record_mutations
from src.backend.v1.use_cases.record_mutations import (
    RecordMutationService,
    get_record_schema,
    parse_create_payload,
    parse_delete_params,
    parse_update_payload,
)


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"fields": {"name": "Cash"}}, "Integration key is required"),
        ({"integrationKey": "", "fields": {"name": "Cash"}}, "Integration key is required"),
        ({"integrationKey": "qbo"}, "Fields are required"),
        ({"integrationKey": "qbo", "fields": None}, "Fields are required"),
        ({"integrationKey": "qbo", "fields": "name=Cash"}, "Fields are required"),
        (None, "Integration key is required"),
    ],
)
def test_parse_create_payload_rejects_missing_values(payload, message) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        parse_create_payload(payload)
    assert excinfo.value.message == message


def test_parse_update_payload_requires_id() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        parse_update_payload({"integrationKey": "qbo", "fields": {}})
    assert excinfo.value.message == "Account ID is required"

    parsed = parse_update_payload({"integrationKey": "qbo", "id": 91, "fields": {}})
    assert parsed.id == "91"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"id": "91", "fields": {}}, "Integration key is required"),
        ({"integrationKey": "", "id": "91", "fields": {}}, "Integration key is required"),
        ({"integrationKey": "qbo", "id": ""}, "Account ID is required"),
        ({"integrationKey": "qbo", "id": "91"}, "Fields are required"),
        ({"integrationKey": "qbo", "id": "91", "fields": None}, "Fields are required"),
        ({"integrationKey": "qbo", "id": "91", "fields": [1, 2]}, "Fields are required"),
    ],
)
def test_parse_update_payload_rejects_missing_values(payload, message) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        parse_update_payload(payload)
    assert excinfo.value.message == message


def test_whitespace_values_are_kept_as_given() -> None:
    parsed = parse_delete_params({"id": "  ", "integrationKey": " qbo "})
    assert parsed.id == "  "
    assert parsed.integration_key == " qbo "


def test_parse_delete_params_checks_id_before_integration_key() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        parse_delete_params({"id": None, "integrationKey": None})
    assert excinfo.value.message == "Record ID is required"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_delete_params({"id": "rec-1", "integrationKey": ""})
    assert excinfo.value.message == "Integration key is required"


def test_create_record_runs_create_action_on_matching_connection() -> None:
    client = FakeIntegrationClient(
        [XERO_CONNECTION, QBO_CONNECTION],
        outputs={"create-ledger-account": {"id": "77", "name": "Cash"}},
    )
    service = RecordMutationService(customer_id="cust-1", client=client)

    output = service.create_record(parse_create_payload({"integrationKey": "qbo", "fields": {"name": "Cash"}}))

    assert output == {"id": "77", "name": "Cash"}
    assert client.runs == [("conn-qbo", "create-ledger-account", {"fields": {"name": "Cash"}})]


def test_create_record_without_connection_runs_nothing() -> None:
    client = FakeIntegrationClient([XERO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client)

    with pytest.raises(ConnectionNotFoundError) as excinfo:
        service.create_record(parse_create_payload({"integrationKey": "qbo", "fields": {}}))

    assert str(excinfo.value) == "No connection found for integration: qbo"
    assert client.runs == []


def test_create_record_requires_configured_account_action(monkeypatch) -> None:
    monkeypatch.setattr(record_mutations, "find_record_action", lambda key: None)
    client = FakeIntegrationClient([QBO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client)

    with pytest.raises(ActionNotConfiguredError) as excinfo:
        service.create_record(parse_create_payload({"integrationKey": "qbo", "fields": {}}))

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Account action not found in configuration"
    assert client.runs == []


def test_create_record_surfaces_vendor_fault() -> None:
    error_data = {"data": {"Fault": {"Error": [{"Message": "X"}]}}}
    client = FakeIntegrationClient(
        [QBO_CONNECTION],
        errors={"create-ledger-account": IntegrationAppError("failed", data=error_data)},
    )
    service = RecordMutationService(customer_id="cust-1", client=client)

    with pytest.raises(RemoteActionError) as excinfo:
        service.create_record(parse_create_payload({"integrationKey": "qbo", "fields": {"name": "Cash"}}))

    assert excinfo.value.message == "X"
    assert excinfo.value.error_data == error_data


def test_update_record_wraps_id_and_fields_in_input() -> None:
    client = FakeIntegrationClient(
        [QBO_CONNECTION], outputs={"update-ledger-account": {"id": "91", "name": "Petty Cash"}}
    )
    service = RecordMutationService(customer_id="cust-1", client=client)

    output = service.update_record(
        parse_update_payload({"integrationKey": "qbo", "id": "91", "fields": {"name": "Petty Cash"}})
    )

    assert output == {"id": "91", "name": "Petty Cash"}
    assert client.runs == [
        ("conn-qbo", "update-ledger-account", {"input": {"id": "91", "fields": {"name": "Petty Cash"}}})
    ]


def test_update_record_generic_failure_keeps_error_message() -> None:
    client = FakeIntegrationClient(
        [QBO_CONNECTION], errors={"update-ledger-account": RuntimeError("connection reset")}
    )
    service = RecordMutationService(customer_id="cust-1", client=client)

    with pytest.raises(RemoteActionError) as excinfo:
        service.update_record(parse_update_payload({"integrationKey": "qbo", "id": "91", "fields": {}}))

    assert excinfo.value.message == "connection reset"
    assert excinfo.value.error_data is None


def test_delete_record_uses_external_id_and_removes_local_record(record_store) -> None:
    record_store.upsert(
        Record(id="rec-1", customer_id="cust-1", fields={"name": "Cash", "ExternalId": "ext-9"})
    )
    client = FakeIntegrationClient([QBO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)

    service.delete_record(parse_delete_params({"id": "rec-1", "integrationKey": "qbo"}))

    assert client.runs == [("conn-qbo", "delete-ledger-account", {"id": "ext-9"})]
    assert record_store.find_one("rec-1", "cust-1") is None


def test_delete_record_falls_back_to_local_id(record_store) -> None:
    record_store.upsert(Record(id="rec-2", customer_id="cust-1", fields={"name": "Cash"}))
    client = FakeIntegrationClient([QBO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)

    service.delete_record(parse_delete_params({"id": "rec-2", "integrationKey": "qbo"}))

    assert client.runs == [("conn-qbo", "delete-ledger-account", {"id": "rec-2"})]


def test_delete_record_removes_local_record_when_remote_delete_fails(record_store) -> None:
    record_store.upsert(Record(id="rec-1", customer_id="cust-1", fields={}))
    client = FakeIntegrationClient(
        [QBO_CONNECTION],
        errors={"delete-ledger-account": IntegrationAppError("Action not found")},
    )
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)

    service.delete_record(parse_delete_params({"id": "rec-1", "integrationKey": "qbo"}))

    assert len(client.runs) == 1
    assert record_store.find_one("rec-1", "cust-1") is None


def test_delete_record_twice_reports_not_found(record_store) -> None:
    record_store.upsert(Record(id="rec-1", customer_id="cust-1", fields={}))
    client = FakeIntegrationClient([QBO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)
    params = parse_delete_params({"id": "rec-1", "integrationKey": "qbo"})

    service.delete_record(params)
    with pytest.raises(RecordNotFoundError):
        service.delete_record(params)

    assert len(client.runs) == 1


def test_delete_record_is_scoped_to_customer(record_store) -> None:
    record_store.upsert(Record(id="rec-1", customer_id="someone-else", fields={}))
    client = FakeIntegrationClient([QBO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)

    with pytest.raises(RecordNotFoundError):
        service.delete_record(parse_delete_params({"id": "rec-1", "integrationKey": "qbo"}))

    assert client.runs == []
    assert record_store.find_one("rec-1", "someone-else") is not None


def test_delete_record_without_connection_keeps_local_record(record_store) -> None:
    record_store.upsert(Record(id="rec-1", customer_id="cust-1", fields={}))
    client = FakeIntegrationClient([XERO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client, store=record_store)

    with pytest.raises(ConnectionNotFoundError):
        service.delete_record(parse_delete_params({"id": "rec-1", "integrationKey": "qbo"}))

    assert client.runs == []
    assert record_store.find_one("rec-1", "cust-1") is not None


def test_list_connected_integrations_skips_connections_without_key() -> None:
    client = FakeIntegrationClient([QBO_CONNECTION, {"id": "orphan"}, XERO_CONNECTION])
    service = RecordMutationService(customer_id="cust-1", client=client)

    integrations = service.list_connected_integrations()

    assert [(i.key, i.connection_id) for i in integrations] == [("qbo", "conn-qbo"), ("xero", "conn-xero")]
    assert integrations[0].name == "QuickBooks"


def test_get_record_schema_resolves_action_key_and_strips_read_only_for_forms() -> None:
    schema = get_record_schema("get-accounts")
    assert "id" in schema["properties"]
    assert schema["required"] == ["id", "name"]

    form_schema = get_record_schema("accounts", form=True)
    assert "id" not in form_schema["properties"]
    assert "createdTime" not in form_schema["properties"]
    assert "name" in form_schema["properties"]
    assert form_schema["required"] == ["name"]

    with pytest.raises(SchemaNotFoundError):
        get_record_schema("invoices")


def test_delete_record_builds_client_only_after_record_is_found(record_store) -> None:
    built = []

    def _factory():
        built.append(True)
        return FakeIntegrationClient([QBO_CONNECTION])

    service = RecordMutationService(customer_id="cust-1", client_factory=_factory, store=record_store)
    with pytest.raises(RecordNotFoundError):
        service.delete_record(parse_delete_params({"id": "gone", "integrationKey": "qbo"}))
    assert built == []

    record_store.upsert(Record(id="rec-1", customer_id="cust-1", fields={}))
    service.delete_record(parse_delete_params({"id": "rec-1", "integrationKey": "qbo"}))
    assert built == [True]
