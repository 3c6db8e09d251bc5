"""MongoDB-backed record store.

All reads and writes are scoped by customer: a record is addressed by the
pair (id, customerId), never by id alone.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from src.backend.common.config.app_config import config
from src.backend.common.models.records import Record

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    @staticmethod
    def _scope(record_id: str, customer_id: str) -> dict[str, Any]:
        return {"id": record_id, "customerId": customer_id}

    @staticmethod
    def _to_record(doc: dict[str, Any]) -> Record:
        doc = {k: v for k, v in doc.items() if k != "_id"}
        return Record.model_validate(doc)

    def find_one(self, record_id: str, customer_id: str) -> Optional[Record]:
        doc = self._collection.find_one(self._scope(record_id, customer_id))
        return self._to_record(doc) if doc else None

    def delete_one(self, record_id: str, customer_id: str) -> bool:
        result = self._collection.delete_one(self._scope(record_id, customer_id))
        return result.deleted_count > 0

    def list_records(self, customer_id: str, record_type: str | None = None) -> list[Record]:
        query: dict[str, Any] = {"customerId": customer_id}
        if record_type:
            query["recordType"] = record_type
        return [self._to_record(doc) for doc in self._collection.find(query).sort("id", 1)]

    def upsert(self, record: Record) -> Record:
        self._collection.replace_one(
            self._scope(record.id, record.customer_id),
            record.to_document(),
            upsert=True,
        )
        return record


class RecordStoreFactory:
    """Lazily creates one pooled MongoClient per process."""

    _client: Optional[MongoClient] = None

    @classmethod
    def get_store(cls) -> RecordStore:
        if cls._client is None:
            logger.info(f"Connecting to MongoDB database '{config.MONGODB_DATABASE}'")
            cls._client = MongoClient(config.MONGODB_URI)
        collection = cls._client[config.MONGODB_DATABASE][config.MONGODB_RECORDS_COLLECTION]
        return RecordStore(collection)

    @classmethod
    def close(cls) -> None:
        if cls._client is not None:
            cls._client.close()
            cls._client = None
