"""API HTTP do motor de extração de eventos."""
from __future__ import annotations

from datetime import datetime
from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from agendador.container import (
    ExtractionConfig,
    ExtractionContainer,
    build_extraction_container,
)
from agendador.extraction import Event, ExtractionResult, Sentence, TaggedSpan
from agendador.settings import get_api_bind_host, get_api_port


class ProcessRequest(BaseModel):
    """Sentença digitada pelo usuário."""

    text: str = Field(min_length=1)


class SpanResponse(BaseModel):
    value: str
    index: int
    type: str

    @classmethod
    def from_dataclass(cls, span: TaggedSpan) -> "SpanResponse":
        return cls(value=span.value, index=span.index, type=span.type)


class EventResponse(BaseModel):
    id: str
    sentence: str
    title: str
    start: datetime
    end: datetime
    person: str | None
    processed: bool
    created_at: datetime

    @classmethod
    def from_dataclass(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            sentence=event.sentence,
            title=event.title,
            start=event.start,
            end=event.end,
            person=event.person,
            processed=event.processed,
            created_at=event.created_at,
        )


class ProcessResponse(BaseModel):
    selection: list[SpanResponse] = Field(default_factory=list)
    event: EventResponse | None = None

    @classmethod
    def from_result(cls, result: ExtractionResult | None) -> "ProcessResponse":
        if result is None:
            return cls()
        return cls(
            selection=[SpanResponse.from_dataclass(span) for span in result.selection],
            event=EventResponse.from_dataclass(result.event),
        )


def include_routes(app: FastAPI, container: ExtractionContainer, *, prefix: str = "") -> None:
    """Registra as rotas que expõem o motor de extração."""

    router = APIRouter(prefix=prefix, tags=["Eventos"])

    @router.get("/healthz")
    def healthcheck() -> dict[str, Any]:
        return {"status": "ok", "ready": container.engine.ready}

    @router.post("/process", response_model=ProcessResponse)
    def process_sentence(payload: ProcessRequest) -> ProcessResponse:
        if not container.engine.ready:
            raise HTTPException(status_code=503, detail="Motor de extração não inicializado")
        result = container.engine.process(Sentence(value=payload.text))
        return ProcessResponse.from_result(result)

    @router.get("/events", response_model=list[EventResponse])
    def list_events(
        start: datetime | None = Query(default=None, alias="from"),
        end: datetime | None = Query(default=None, alias="to"),
    ) -> list[EventResponse]:
        if start is not None and end is not None and end <= start:
            raise HTTPException(status_code=400, detail="Intervalo de datas inválido")
        events = container.event_store.list(start=start, end=end)
        return [EventResponse.from_dataclass(event) for event in events]

    @router.get("/events/{event_id}", response_model=EventResponse)
    def get_event(event_id: str) -> EventResponse:
        event = container.event_store.get(event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Evento não encontrado")
        return EventResponse.from_dataclass(event)

    @router.post("/events/{event_id}/processed", response_model=EventResponse)
    def mark_processed(event_id: str) -> EventResponse:
        event = container.event_store.mark_processed(event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Evento não encontrado")
        return EventResponse.from_dataclass(event)

    app.include_router(router)


def create_app(config: ExtractionConfig | None = None) -> FastAPI:
    """Cria a aplicação FastAPI com o motor já inicializado."""

    config = config or ExtractionConfig.from_env()
    container = build_extraction_container(config)
    container.engine.init()

    app = FastAPI(
        title="Agendador API",
        version="1.0.0",
        description="Extração de eventos de calendário a partir de sentenças livres.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    include_routes(app, container)
    app.state.container = container
    return app


def run_api(host: str | None = None, port: int | None = None) -> None:
    """Executa a API utilizando o Uvicorn."""

    load_dotenv()
    uvicorn.run(
        "agendador.api:create_app",
        host=host or get_api_bind_host(),
        port=port or get_api_port(),
        factory=True,
    )


__all__ = [
    "EventResponse",
    "ProcessRequest",
    "ProcessResponse",
    "SpanResponse",
    "create_app",
    "include_routes",
    "run_api",
]
