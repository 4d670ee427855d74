"""CLI entrypoint for Chunkwise."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer

from chunkwise.core.config import get_settings
from chunkwise.ingest.pipeline import DocumentProcessor

app = typer.Typer(name="chunkwise", help="Chunkwise command-line interface")
documents_app = typer.Typer(name="documents")
app.add_typer(documents_app, name="documents")

DEFAULT_HOST = "http://127.0.0.1:3001"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("CHKW_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    resp = requests.request(method, url, timeout=60, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


@app.command()
def inspect(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document to analyze locally"),
    mime: Optional[str] = typer.Option(None, "--mime", help="Declared MIME type"),
    show_chunks: bool = typer.Option(False, "--chunks", help="Print every chunk"),
) -> None:
    """Report structure, strategy and chunks for a file without indexing it."""
    processor = DocumentProcessor(settings=get_settings())
    try:
        processed = processor.process(path.read_bytes(), path.name, mime)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    report: dict[str, object] = {
        "metadata": processed.metadata,
        "strategy": processed.strategy.to_dict(),
    }
    if show_chunks:
        report["chunks"] = [chunk.to_dict() for chunk in processed.chunks]
    typer.echo(json.dumps(report, indent=2))


@app.command()
def upload(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document to upload"),
    mime: Optional[str] = typer.Option(None, "--mime", help="Declared MIME type"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Upload a document to the server for chunking and indexing."""
    with path.open("rb") as fh:
        files = {"file": (path.name, fh, mime or "application/octet-stream")}
        resp = _request("POST", "/documents", host=host, files=files)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def query(
    q: str = typer.Argument(..., help="Query text"),
    k: Optional[int] = typer.Option(None, "--k", help="Number of results to return"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Query the index and print results with their diversity analysis."""
    payload: dict[str, object] = {"query": q}
    if k is not None:
        payload["k"] = k
    resp = _request("POST", "/query", host=host, json=payload)
    typer.echo(json.dumps(resp.json(), indent=2))


@documents_app.command("list")
def list_documents(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List indexed documents."""
    resp = _request("GET", "/documents", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@documents_app.command("remove")
def remove_document(
    document_id: str = typer.Argument(..., help="Document identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Remove an indexed document."""
    _request("DELETE", f"/documents/{document_id}", host=host)
    typer.echo(json.dumps({"status": "ok"}))


if __name__ == "__main__":
    app()
