"""Tests for the command-line interface (offline mock providers)."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hybridrag import __version__

from .main import app, load_documents

runner = CliRunner()


@pytest.fixture
def escrow_file(tmp_path: Path) -> Path:
    path = tmp_path / "escrow_policy.txt"
    path.write_text(
        "Your escrow shortage occurred because property taxes increased. "
        "The monthly payment was adjusted to cover the shortage.",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def json_file(tmp_path: Path) -> Path:
    path = tmp_path / "docs.json"
    path.write_text(
        json.dumps(
            {
                "documents": [
                    {"id": "late", "title": "Late Fees", "content": "Late payments incur a fee."},
                    {"id": "ins", "title": "Insurance", "content": "Hazard insurance is required."},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


def test_load_text_document(escrow_file: Path) -> None:
    [doc] = load_documents([escrow_file])
    assert doc.id == "escrow_policy"
    assert doc.title == "escrow policy"
    assert doc.metadata["source"] == str(escrow_file)


def test_load_json_documents(json_file: Path) -> None:
    docs = load_documents([json_file])
    assert [d.id for d in docs] == ["late", "ins"]


def test_load_json_list(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text(json.dumps([{"id": "a", "title": "A", "content": "alpha"}]), encoding="utf-8")
    assert [d.id for d in load_documents([path])] == ["a"]


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_ingest_reports_counts(escrow_file: Path, json_file: Path) -> None:
    result = runner.invoke(app, ["ingest", str(escrow_file), str(json_file)])

    assert result.exit_code == 0
    assert "Ingestion Summary" in result.output


def test_ingest_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["ingest", str(tmp_path / "missing.txt")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_ask_prints_ranked_chunks(escrow_file: Path, json_file: Path) -> None:
    result = runner.invoke(
        app,
        ["ask", "escrow shortage", "--file", str(escrow_file), "-f", str(json_file), "-k", "2"],
    )

    assert result.exit_code == 0
    assert "#1" in result.output
    assert "Expanded queries" in result.output


def test_ask_without_expansion(escrow_file: Path) -> None:
    result = runner.invoke(
        app, ["ask", "escrow shortage", "--file", str(escrow_file), "--no-expand"]
    )

    assert result.exit_code == 0
    assert "Expanded queries" not in result.output
    assert "escrow_policy_chunk_0" in result.output


def test_ingest_with_title_and_query(escrow_file: Path) -> None:
    result = runner.invoke(
        app,
        ["ingest", str(escrow_file), "--title", "Escrow Letter", "--query", "escrow shortage"],
    )

    assert result.exit_code == 0
    assert "Ingestion Summary" in result.output
    assert "Escrow Letter" in result.output


def test_load_text_document_with_title(escrow_file: Path) -> None:
    [doc] = load_documents([escrow_file], title="Escrow Letter")
    assert doc.title == "Escrow Letter"


def test_ingest_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"documents": [', encoding="utf-8")

    result = runner.invoke(app, ["ingest", str(path)])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert "Cannot read" in result.output
    assert "Traceback" not in result.output


def test_ask_invalid_document_object(tmp_path: Path) -> None:
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps([{"id": "a", "keywords": "escrow"}]), encoding="utf-8")

    result = runner.invoke(app, ["ask", "escrow", "--file", str(path)])

    assert result.exit_code == 1
    assert "Invalid document" in result.output
    assert "keywords" in result.output
