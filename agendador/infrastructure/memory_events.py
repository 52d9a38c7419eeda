"""Controlador de eventos em memória."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterator
from uuid import uuid4

from agendador.extraction import Event, Sentence

SemanticKey = tuple[datetime, datetime, str]


def semantic_key(sentence: Sentence) -> SemanticKey:
    """Chave semântica da sentença: início, fim e título do evento."""

    if sentence.start_date is None or sentence.end_date is None or sentence.title is None:
        raise ValueError("Sentença sem campos semânticos preenchidos")
    return sentence.start_date, sentence.end_date, sentence.title


def overlaps(event: Event, start: datetime | None, end: datetime | None) -> bool:
    """Indica se o evento cruza o intervalo semiaberto ``[start, end)``."""

    if end is not None and event.start >= end:
        return False
    if start is not None and event.end <= start:
        return False
    return True


class InMemoryEventController:
    """Armazena eventos em memória com acesso protegido por lock.

    A checagem sintática compara o texto exato da sentença; a semântica compara
    início, fim e título. Quando a checagem semântica encontra um evento, ele
    passa a ser associado ao novo texto da sentença.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[str, Event] = {}
        self._by_sentence: dict[str, str] = {}

    def syntactic_check(self, sentence: Sentence) -> Event | None:
        with self._lock:
            event_id = self._by_sentence.get(sentence.value)
            if event_id is None:
                return None
            return replace(self._events[event_id])

    def semantic_check(self, sentence: Sentence) -> Event | None:
        key = semantic_key(sentence)
        with self._lock:
            for event in self._events.values():
                if (event.start, event.end, event.title) != key:
                    continue
                self._rebind(event, sentence.value)
                return replace(event)
            return None

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
        with self._lock:
            self._events[event.id] = event
            self._by_sentence[event.sentence] = event.id
            return replace(event)

    def mark_processed(self, event_id: str) -> Event | None:
        """Marca o evento como tratado pelo consumidor."""

        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return None
            event.processed = True
            return replace(event)

    def get(self, event_id: str) -> Event | None:
        with self._lock:
            event = self._events.get(event_id)
            return replace(event) if event is not None else None

    def list(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> Iterator[Event]:
        """Eventos em ordem de criação, opcionalmente só os que cruzam o intervalo."""

        with self._lock:
            events = [
                replace(event)
                for event in self._events.values()
                if overlaps(event, start, end)
            ]
        yield from sorted(events, key=lambda event: event.created_at)

    def _rebind(self, event: Event, text: str) -> None:
        if event.sentence == text:
            return
        self._by_sentence.pop(event.sentence, None)
        event.sentence = text
        self._by_sentence[text] = event.id

    def __len__(self) -> int:  # pragma: no cover - trivial helper
        with self._lock:
            return len(self._events)


__all__ = ["InMemoryEventController", "SemanticKey", "overlaps", "semantic_key"]
