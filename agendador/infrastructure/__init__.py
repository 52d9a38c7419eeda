"""Infrastructure public API for Agendador.

Exposes the concrete identity collaborators and the Mongo helpers so
consumers can import from ``agendador.infrastructure`` directly.
"""

from .database import MongoClientFactory, MongoSettings
from .memory_events import InMemoryEventController
from .mongo_events import MongoEventController

__all__ = [
    "InMemoryEventController",
    "MongoClientFactory",
    "MongoEventController",
    "MongoSettings",
]
