"""Interface de linha de comando do Agendador."""
from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from agendador.api import run_api
from agendador.container import (
    ExtractionConfig,
    ExtractionContainer,
    build_extraction_container,
)
from agendador.extraction import ConfigurationError, Sentence
from agendador.settings import get_log_level


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Agendador - extração de eventos a partir de sentenças"
    )
    parser.add_argument("--log-level", default=None, help="Nível de log (default: INFO)")
    parser.add_argument(
        "--patterns",
        default=None,
        help="Diretório com os arquivos de padrões (sobrescreve AGENDADOR_PATTERNS_PATH)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser(
        "process", help="Extrai eventos de uma ou mais sentenças, na ordem informada"
    )
    process.add_argument("sentences", nargs="+", help="Sentenças a processar")

    inspect = subparsers.add_parser(
        "inspect", help="Mostra tokens, classes gramaticais e entidades de cada linha"
    )
    inspect.add_argument("text", help="Texto a inspecionar")

    events = subparsers.add_parser("events", help="Lista os eventos conhecidos pelo backend")
    events.add_argument(
        "--from",
        dest="start",
        type=datetime.fromisoformat,
        default=None,
        help="Lista apenas eventos que terminam após esta data (ISO 8601)",
    )
    events.add_argument(
        "--to",
        dest="end",
        type=datetime.fromisoformat,
        default=None,
        help="Lista apenas eventos que começam antes desta data (ISO 8601)",
    )

    serve = subparsers.add_parser("serve", help="Inicia a API HTTP")
    serve.add_argument("--host", default=None, help="Endereço de escuta")
    serve.add_argument("--port", type=int, default=None, help="Porta de escuta")

    return parser.parse_args(argv)


def main(
    argv: Sequence[str] | None = None,
    *,
    config: ExtractionConfig | None = None,
    console: Console | None = None,
) -> int:
    load_dotenv()
    args = parse_args(argv)
    console = console or Console()
    level_name = args.log_level or get_log_level()
    handler = RichHandler(console=console, markup=True, rich_tracebacks=True)
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    logger = logging.getLogger("agendador.cli")

    if args.command == "serve":
        run_api(host=args.host, port=args.port)
        return 0

    config = config or ExtractionConfig.from_env()
    if args.patterns:
        config.patterns_path = args.patterns
    container = build_extraction_container(config)

    if args.command == "events":
        _print_events(console, container, start=args.start, end=args.end)
        return 0

    try:
        container.engine.init()
    except ConfigurationError as exc:
        logger.error("Falha ao inicializar o motor: %s", exc)
        console.print(f"[red]{exc}[/red]")
        return 1

    if args.command == "process":
        for text in args.sentences:
            result = container.engine.process(Sentence(value=text))
            if result is None:
                console.print(f"[yellow]Nenhum evento em:[/yellow] {text}")
                continue
            console.print_json(data=result.as_dict())
    elif args.command == "inspect":
        console.print_json(data=container.engine.inspect(args.text))
    return 0


def _print_events(
    console: Console,
    container: ExtractionContainer,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> None:
    events = list(container.event_store.list(start=start, end=end))
    if not events:
        console.print("[yellow]Nenhum evento registrado no momento.[/yellow]")
        return
    table = Table(title="Eventos")
    table.add_column("id")
    table.add_column("título")
    table.add_column("início")
    table.add_column("fim")
    table.add_column("processado")
    for event in events:
        table.add_row(
            event.id,
            event.title,
            event.start.isoformat(),
            event.end.isoformat(),
            "sim" if event.processed else "não",
        )
    console.print(table)


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
