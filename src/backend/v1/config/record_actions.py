"""Record action registry and the remote action keys used by record mutations."""

from __future__ import annotations

from src.backend.common.models.records import RecordAction

ACCOUNTS_RECORD_ACTION_KEY = "get-accounts"

CREATE_ACTION_KEY = "create-ledger-account"
UPDATE_ACTION_KEY = "update-ledger-account"
DELETE_ACTION_KEY = "delete-ledger-account"

RECORD_ACTIONS: list[RecordAction] = [
    RecordAction(
        key=ACCOUNTS_RECORD_ACTION_KEY,
        name="Accounts",
        type="default",
        schema_key="accounts",
    ),
]


def find_record_action(key: str, actions: list[RecordAction] | None = None) -> RecordAction | None:
    for action in RECORD_ACTIONS if actions is None else actions:
        if action.key == key:
            return action
    return None
