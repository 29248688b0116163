from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from jobintake.api.app import create_app
from jobintake.config import get_settings
from jobintake.core.pipeline import IngestionPipeline
from jobintake.db.init import init_database
from jobintake.db.repositories import Repository
from jobintake.db.session import SessionLocal
from jobintake.logging_config import configure_logging
from jobintake.types import IngestionInput

app = typer.Typer(help="JobIntake CLI")
applications_app = typer.Typer(help="Saved application commands")

app.add_typer(applications_app, name="applications")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Create the data directory and database tables."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("ingest")
def ingest_cmd(
    owner: str = typer.Option(..., "--owner", help="Owner id the record belongs to"),
    url: str | None = typer.Option(None, "--url"),
    text: str | None = typer.Option(None, "--text", help="Pasted job description"),
    text_file: Path | None = typer.Option(None, "--text-file", exists=True, readable=True),
    title: str | None = typer.Option(None, "--title", help="Page title hint"),
    save: bool = typer.Option(True, "--save/--no-save"),
) -> None:
    """Run a posting through the ingestion pipeline and print the result."""
    configure_logging()
    ensure_initialized()
    if text_file is not None:
        text = text_file.read_text(encoding="utf-8")

    payload = IngestionInput(url=url, pasted_text=text, page_title=title)
    with SessionLocal() as db:
        outcome = IngestionPipeline(db).run(payload, owner_id=owner, save=save)
        typer.echo(json.dumps(outcome.to_payload(), indent=2, default=str))

    if not outcome.ok:
        raise typer.Exit(code=1)


@applications_app.command("list")
def applications_list(
    owner: str = typer.Option(..., "--owner"),
    limit: int = typer.Option(20, "--limit"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        rows = repo.list_applications(owner, limit=limit)
        payload = {
            "total": repo.count_applications(owner),
            "applications": [
                {
                    "id": row.id,
                    "company": row.company,
                    "title": row.title,
                    "location": row.location,
                    "url": row.url,
                    "stage": row.stage.value,
                    "created_at": row.created_at.isoformat() if row.created_at else None,
                }
                for row in rows
            ],
        }
        typer.echo(json.dumps(payload, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL"),
) -> None:
    configure_logging(log_level)
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(
        app_instance,
        host=host or settings.app_host,
        port=port or settings.app_port,
        log_level=(log_level or settings.log_level).lower(),
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
