"""Agendador - extração de eventos de calendário a partir de texto livre."""
from .container import ExtractionConfig, build_extraction_container
from .extraction import (
    ConfigurationError,
    Event,
    EventExtractionEngine,
    ExtractionResult,
    Sentence,
    SmartDateParser,
)
from .infrastructure import InMemoryEventController, MongoEventController

__all__ = [
    "ConfigurationError",
    "Event",
    "EventExtractionEngine",
    "ExtractionConfig",
    "ExtractionResult",
    "InMemoryEventController",
    "MongoEventController",
    "Sentence",
    "SmartDateParser",
    "build_extraction_container",
]
