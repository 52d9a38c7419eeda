"""Mongo database utilities."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from pymongo import MongoClient

DEFAULT_EVENTS_COLLECTION = "events"


def get_env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise RuntimeError(f"Environment variable '{name}' is not set")
    return value


@dataclass
class MongoSettings:
    uri: str
    database: str
    events_collection: str = DEFAULT_EVENTS_COLLECTION

    @classmethod
    def from_env(cls) -> "MongoSettings":
        uri = get_env("MONGO_URI", "mongodb://localhost:27017")
        database = get_env("MONGO_DATABASE", "agendador")
        events_collection = get_env("AGENDADOR_EVENTS_COLLECTION", DEFAULT_EVENTS_COLLECTION)
        return cls(uri=uri, database=database, events_collection=events_collection)


class MongoClientFactory:
    """Creates Mongo clients lazily and reuses the same connection pool."""

    def __init__(self, settings: MongoSettings | None = None) -> None:
        self._settings = settings or MongoSettings.from_env()
        self._client: MongoClient | None = None

    @property
    def settings(self) -> MongoSettings:
        return self._settings

    def create_client(self) -> MongoClient:
        if not self._client:
            self._client = MongoClient(self._settings.uri)
        return self._client

    def get_database(self) -> Any:
        client = self.create_client()
        return client[self._settings.database]

    def get_events_collection(self) -> Any:
        return self.get_database()[self._settings.events_collection]


__all__ = ["DEFAULT_EVENTS_COLLECTION", "MongoClientFactory", "MongoSettings", "get_env"]
