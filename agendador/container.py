"""Montagem das dependências do motor de extração de eventos."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Protocol

from agendador.extraction import (
    DateRangeParser,
    Event,
    EventController,
    EventExtractionEngine,
    SmartDateParser,
)
from agendador.extraction.tagger import PipelineFactory
from agendador.infrastructure import (
    InMemoryEventController,
    MongoClientFactory,
    MongoEventController,
    MongoSettings,
)
from agendador.settings import (
    get_default_duration_minutes,
    get_event_backend,
    get_patterns_path,
    get_spacy_model,
)


class EventStore(EventController, Protocol):
    """Identity collaborator that can also be browsed by the outer surfaces."""

    def mark_processed(self, event_id: str) -> Event | None:
        ...

    def get(self, event_id: str) -> Event | None:
        ...

    def list(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> Iterable[Event]:
        ...


_DEFAULT_EVENT_STORE: InMemoryEventController | None = None


@dataclass
class ExtractionConfig:
    """Configuration required to bootstrap the extraction engine."""

    patterns_path: str
    spacy_model: str
    default_duration_minutes: int = 60
    event_backend: str = "memory"
    mongo_settings: MongoSettings | None = None
    event_store: EventStore | None = None
    date_parser: DateRangeParser | None = None
    pipeline_factory: PipelineFactory | None = None

    @classmethod
    def from_env(cls) -> "ExtractionConfig":
        """Build a configuration instance from environment variables."""

        return cls(
            patterns_path=get_patterns_path(),
            spacy_model=get_spacy_model(),
            default_duration_minutes=get_default_duration_minutes(),
            event_backend=get_event_backend(),
        )


@dataclass
class ExtractionContainer:
    """Resolved dependencies for the extraction engine."""

    config: ExtractionConfig
    engine: EventExtractionEngine
    event_store: EventStore


def get_default_event_store() -> InMemoryEventController:
    """Return the process-wide in-memory event store."""

    global _DEFAULT_EVENT_STORE
    if _DEFAULT_EVENT_STORE is None:
        _DEFAULT_EVENT_STORE = InMemoryEventController()
    return _DEFAULT_EVENT_STORE


def build_event_store(config: ExtractionConfig) -> EventStore:
    if config.event_store is not None:
        return config.event_store
    if config.event_backend == "memory":
        return get_default_event_store()
    if config.event_backend == "mongo":
        factory = MongoClientFactory(config.mongo_settings)
        return MongoEventController(factory.get_events_collection())
    raise ValueError(
        "Unsupported event backend: {backend}".format(backend=config.event_backend)
    )


def build_extraction_container(config: ExtractionConfig) -> ExtractionContainer:
    """Instantiate the engine and its identity collaborator.

    The engine receives the pattern path but is not initialised; callers run
    :meth:`EventExtractionEngine.init` when they are ready to load the models.
    """

    event_store = build_event_store(config)
    date_parser = config.date_parser or SmartDateParser(
        default_duration=timedelta(minutes=config.default_duration_minutes)
    )
    engine = EventExtractionEngine(
        event_controller=event_store,
        date_parser=date_parser,
        pipeline_factory=config.pipeline_factory,
        model_name=config.spacy_model,
    )
    engine.inject_path(config.patterns_path)
    return ExtractionContainer(config=config, engine=engine, event_store=event_store)


__all__ = [
    "EventStore",
    "ExtractionConfig",
    "ExtractionContainer",
    "build_event_store",
    "build_extraction_container",
    "get_default_event_store",
]
