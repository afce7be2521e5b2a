"""Typer CLI entrypoint for the candidate store."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterator, List, Optional

import pendulum
import typer

from . import __version__
from .config import load_settings
from .container import StoreContainer, bootstrap, create_container
from .errors import Conflict, InvalidArgument, StoreUnavailable
from .logging import configure_logging
from .schemas import AppConfig, Candidate

app = typer.Typer(help="Candidate storage CLI.")


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML settings path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Manage candidates stored in table storage."""
    settings = load_settings(config)
    configure_logging(log_level or settings.logging.level, json_output=settings.logging.json_output)
    ctx.obj = settings


@app.command()
def seed(
    ctx: typer.Context,
    source: Optional[Path] = typer.Option(None, dir_okay=False, help="Seed document (JSON array)."),
) -> None:
    """Seed the store from a JSON document if it is empty and seeding is enabled."""
    settings: AppConfig = ctx.obj
    with _cli_errors():
        report = bootstrap(_container(settings), source)
    payload = asdict(report)
    payload["timestamp"] = pendulum.now().to_iso8601_string()
    payload["app_version"] = __version__
    _emit(payload)


@app.command("list")
def list_candidates(ctx: typer.Context) -> None:
    """List every stored candidate."""
    with _cli_errors():
        candidates = _container(ctx.obj).store().list_all()
    _emit([_dump(candidate) for candidate in candidates])


@app.command()
def search(ctx: typer.Context, term: str = typer.Argument("", help="Substring to look for.")) -> None:
    """Search candidates by name, email, role, skill or language."""
    with _cli_errors():
        candidates = _container(ctx.obj).store().search(term)
    _emit([_dump(candidate) for candidate in candidates])


@app.command()
def show(ctx: typer.Context, email: str = typer.Argument(..., help="Candidate email.")) -> None:
    """Show a single candidate."""
    with _cli_errors():
        candidate = _container(ctx.obj).store().get(email)
    if candidate is None:
        typer.echo(f"Candidate {email} not found.", err=True)
        raise typer.Exit(code=1)
    _emit(_dump(candidate))


@app.command()
def add(
    ctx: typer.Context,
    email: str = typer.Option(..., help="Candidate email (unique key)."),
    first_name: str = typer.Option("", help="First name."),
    last_name: str = typer.Option("", help="Last name."),
    current_role: str = typer.Option("", help="Current role."),
    skill: Optional[List[str]] = typer.Option(None, help="Skill; repeat for several."),
    language: Optional[List[str]] = typer.Option(None, help="Spoken language; repeat for several."),
) -> None:
    """Add a candidate unless one with the same email exists."""
    candidate = Candidate(
        first_name=first_name,
        last_name=last_name,
        email=email,
        current_role=current_role,
        skills=list(skill or []),
        spoken_languages=list(language or []),
    )
    with _cli_errors():
        added = _container(ctx.obj).store().add(candidate)
    _emit({"email": email, "added": added})
    if not added:
        raise typer.Exit(code=1)


@app.command()
def update(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Candidate email."),
    current_role: Optional[str] = typer.Option(None, help="Replace the current role."),
    add_skill: Optional[List[str]] = typer.Option(None, help="Skill to append; repeat for several."),
    add_language: Optional[List[str]] = typer.Option(None, help="Spoken language to append; repeat for several."),
    retries: int = typer.Option(3, min=0, help="Retries when a concurrent update wins."),
) -> None:
    """Update a candidate, retrying the read-modify-write cycle on conflicts."""

    def mutate(candidate: Candidate) -> Candidate:
        changes: dict[str, Any] = {
            "skills": _append_unique(candidate.skills, add_skill or []),
            "spoken_languages": _append_unique(candidate.spoken_languages, add_language or []),
        }
        if current_role is not None:
            changes["current_role"] = current_role
        return candidate.model_copy(update=changes)

    with _cli_errors():
        store = _container(ctx.obj).store()
        for attempt in range(retries + 1):
            try:
                updated = store.update(email, mutate)
                break
            except Conflict:
                if attempt == retries:
                    raise
    _emit({"email": email, "updated": updated})
    if not updated:
        raise typer.Exit(code=1)


@app.command()
def remove(ctx: typer.Context, email: str = typer.Argument(..., help="Candidate email.")) -> None:
    """Remove a candidate."""
    with _cli_errors():
        removed = _container(ctx.obj).store().remove(email)
    _emit({"email": email, "removed": removed})
    if not removed:
        raise typer.Exit(code=1)


def _container(settings: AppConfig) -> StoreContainer:
    return create_container(settings=settings)


@contextmanager
def _cli_errors() -> Iterator[None]:
    try:
        yield
    except InvalidArgument as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except Conflict as exc:
        typer.echo(f"Conflict: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except StoreUnavailable as exc:
        typer.echo(f"Storage unavailable: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _append_unique(values: list[str], extra: list[str]) -> list[str]:
    merged = list(values)
    for value in extra:
        if value not in merged:
            merged.append(value)
    return merged


def _dump(candidate: Candidate) -> dict[str, Any]:
    payload = candidate.model_dump(mode="json")
    payload["full_name"] = candidate.full_name
    return payload


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
