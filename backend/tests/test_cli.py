"""CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from chunkwise.cli import main

runner = CliRunner()


class _FakeResponse:
    def __init__(self, payload: object, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.ok = status_code < 400
        self.text = json.dumps(payload)

    def json(self) -> object:
        return self._payload


def test_inspect_reports_strategy(tmp_path: Path) -> None:
    sample = tmp_path / "sample.txt"
    sample.write_text("Rivers carry water from the mountains to the sea. The sea is deep and wide.")

    result = runner.invoke(main.app, ["inspect", str(sample), "--chunks"])

    assert result.exit_code == 0, result.output
    assert '"name": "smart"' in result.output
    assert '"chunk_count": 1' in result.output
    assert '"id": "chunk-0"' in result.output


def test_inspect_rejects_unsupported_files(tmp_path: Path) -> None:
    image = tmp_path / "image.png"
    image.write_bytes(b"\x89PNG\r\n")
    result = runner.invoke(main.app, ["inspect", str(image)])
    assert result.exit_code == 1


def test_query_posts_to_server(monkeypatch) -> None:
    calls: list[tuple[str, str, dict]] = []

    def fake_request(method: str, url: str, timeout: int, **kwargs):
        calls.append((method, url, kwargs))
        return _FakeResponse({"results": []})

    monkeypatch.setattr(main.requests, "request", fake_request)
    monkeypatch.setenv("CHKW_HOST", "http://backend.test/")

    result = runner.invoke(main.app, ["query", "rivers", "--k", "2"])

    assert result.exit_code == 0, result.output
    assert calls == [("POST", "http://backend.test/query", {"json": {"query": "rivers", "k": 2}})]


def test_failed_request_exits_nonzero(monkeypatch) -> None:
    monkeypatch.setattr(
        main.requests,
        "request",
        lambda method, url, timeout, **kwargs: _FakeResponse({"detail": "Document not found"}, 404),
    )
    result = runner.invoke(main.app, ["documents", "remove", "doc-missing"])
    assert result.exit_code == 1
