"""
Shared fixtures for the catalog API tests.

The Postgres layer is swapped for an in-memory `FakeCatalog` through
monkeypatch, so no database is needed. Upload and frontend folders point at
temporary directories before the app is imported (StaticFiles binds its
directory at import time).

Example usage:
    def test_listing(client, catalog):
        catalog.add(name="Report", date="2024-01-01", codes="A,B")
        assert client.get("/api/documents").json()["count"] == 1
"""

import io
import os
import shutil
import tempfile
from pathlib import Path

os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="catalog-uploads-")
os.environ["PUBLIC_DIR"] = tempfile.mkdtemp(prefix="catalog-public-")

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfWriter

from documents import repository
from main import app


class FakeCatalog:
    """
    In-memory stand-in for `documents.repository`.
    """

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.catalog_reads = 0

    def add(self, *, name, date, codes, file_path=None, original_filename=None, size_bytes=0, page_count=1):
        document_id = self.next_id
        self.next_id += 1
        self.rows[document_id] = {
            "id": document_id,
            "name": name,
            "date": date,
            "codes": codes,
            "file_path": file_path or f"/uploads/seed-{document_id}.pdf",
            "original_filename": original_filename,
            "size_bytes": size_bytes,
            "page_count": page_count,
            "created_at": None,
            "updated_at": None,
        }
        return document_id

    async def ensure_schema(self):
        return None

    async def list_documents(self):
        rows = sorted(self.rows.values(), key=lambda r: r["id"], reverse=True)
        return [dict(r) for r in sorted(rows, key=lambda r: r["date"], reverse=True)]

    async def get_document(self, document_id):
        row = self.rows.get(document_id)
        return dict(row) if row is not None else None

    async def fetch_catalog(self):
        self.catalog_reads += 1
        return [
            {k: r[k] for k in ("id", "name", "date", "codes", "file_path")}
            for r in sorted(self.rows.values(), key=lambda r: r["id"])
        ]

    async def insert_document(self, **kwargs):
        return self.add(**kwargs)

    async def update_document(
        self,
        document_id,
        *,
        name,
        date,
        codes,
        file_path=None,
        original_filename=None,
        size_bytes=None,
        page_count=None,
    ):
        row = self.rows.get(document_id)
        if row is None:
            return None
        previous = row["file_path"]
        row.update(name=name, date=date, codes=codes)
        if file_path is not None:
            row.update(
                file_path=file_path,
                original_filename=original_filename,
                size_bytes=size_bytes,
                page_count=page_count,
            )
        return {"id": document_id, "previous_file_path": previous}

    async def delete_document(self, document_id):
        row = self.rows.pop(document_id, None)
        if row is None:
            return None
        return {"id": document_id, "file_path": row["file_path"]}


@pytest.fixture
def catalog(monkeypatch):
    fake = FakeCatalog()
    for name in (
        "ensure_schema",
        "list_documents",
        "get_document",
        "fetch_catalog",
        "insert_document",
        "update_document",
        "delete_document",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def upload_dir():
    """
    The upload folder shared with the app; emptied after each test.
    """
    path = Path(os.environ["UPLOAD_DIR"])
    path.mkdir(parents=True, exist_ok=True)
    yield path
    for child in path.iterdir():
        if child.is_file():
            child.unlink()


@pytest.fixture
def public_dir():
    path = Path(os.environ["PUBLIC_DIR"])
    yield path
    for child in path.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture
def client(catalog, upload_dir):
    # No `with` block: the lifespan (real DB pool) is not started.
    return TestClient(app)


def make_pdf(pages=1):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes():
    return make_pdf(pages=2)
