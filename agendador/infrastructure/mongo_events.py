"""Controlador de eventos persistido no MongoDB."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import uuid4

from pymongo import ReturnDocument
from pymongo.collection import Collection

from agendador.extraction import Event, Sentence

from .memory_events import semantic_key


class MongoEventController:
    """Implementação MongoDB das checagens de identidade de eventos."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection
        self._collection.create_index([("sentence", 1)], background=True)
        self._collection.create_index(
            [
                ("start", 1),
                ("end", 1),
                ("title", 1),
            ],
            background=True,
        )

    def syntactic_check(self, sentence: Sentence) -> Event | None:
        data = self._collection.find_one({"sentence": sentence.value})
        if not data:
            return None
        return self._deserialize_event(data)

    def semantic_check(self, sentence: Sentence) -> Event | None:
        start, end, title = semantic_key(sentence)
        data = self._collection.find_one_and_update(
            {"start": start, "end": end, "title": title},
            {"$set": {"sentence": sentence.value}},
            return_document=ReturnDocument.AFTER,
        )
        if not data:
            return None
        return self._deserialize_event(data)

    def create_new_event(self, sentence: Sentence) -> Event:
        start, end, title = semantic_key(sentence)
        event = Event(
            id=str(uuid4()),
            sentence=sentence.value,
            title=title,
            start=start,
            end=end,
            person=sentence.person,
        )
        self._collection.insert_one(self._serialize_event(event))
        return event

    def mark_processed(self, event_id: str) -> Event | None:
        data = self._collection.find_one_and_update(
            {"_id": event_id},
            {"$set": {"processed": True}},
            return_document=ReturnDocument.AFTER,
        )
        if not data:
            return None
        return self._deserialize_event(data)

    def get(self, event_id: str) -> Event | None:
        data = self._collection.find_one({"_id": event_id})
        if not data:
            return None
        return self._deserialize_event(data)

    def list(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> Iterable[Event]:
        criteria: dict[str, Any] = {}
        if end is not None:
            criteria["start"] = {"$lt": end}
        if start is not None:
            criteria["end"] = {"$gt": start}
        for data in self._collection.find(criteria).sort("created_at", 1):
            yield self._deserialize_event(data)

    def _serialize_event(self, event: Event) -> dict[str, Any]:
        return {
            "_id": event.id,
            "sentence": event.sentence,
            "title": event.title,
            "start": event.start,
            "end": event.end,
            "person": event.person,
            "processed": event.processed,
            "created_at": event.created_at,
        }

    def _deserialize_event(self, data: dict[str, Any]) -> Event:
        created_at = data.get("created_at") or datetime.now(timezone.utc)
        return Event(
            id=str(data["_id"]),
            sentence=data["sentence"],
            title=data["title"],
            start=data["start"],
            end=data["end"],
            person=data.get("person"),
            processed=bool(data.get("processed", False)),
            created_at=created_at,
        )


__all__ = ["MongoEventController"]
