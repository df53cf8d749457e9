"""
Settings, DB URL handling and upload storage helpers.
"""

import pytest
from fastapi import HTTPException

from core import db, settings, storage


class TestSettings:
    def test_env_int_falls_back_on_garbage(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "lots")
        assert settings.env_int("DB_POOL_MAX_SIZE", 5) == 5

        monkeypatch.setenv("DB_POOL_MAX_SIZE", " 9 ")
        assert settings.env_int("DB_POOL_MAX_SIZE", 5) == 9

    def test_cors_origins(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        assert settings.cors_origins() == list(settings.DEFAULT_CORS_ORIGINS)

        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, ,https://b.example")
        assert settings.cors_origins() == ["https://a.example", "https://b.example"]

    @pytest.mark.parametrize("raw", ["ten", "0", "-5"])
    def test_bad_upload_limit(self, monkeypatch, raw):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", raw)

        with pytest.raises(HTTPException) as exc_info:
            settings.max_upload_bytes()

        assert exc_info.value.status_code == 500

    def test_default_upload_limit(self, monkeypatch):
        monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
        assert settings.max_upload_bytes() == settings.DEFAULT_MAX_UPLOAD_BYTES


class TestDatabaseUrl:
    def test_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(RuntimeError):
            db.database_url()

    def test_sslmode_dropped(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/catalog?sslmode=require&application_name=api")

        assert db.database_url() == "postgresql://u:p@db:5432/catalog?application_name=api"

    def test_pool_must_be_initialized(self):
        with pytest.raises(RuntimeError):
            db.pool()


class TestStorage:
    def test_save_and_delete(self, upload_dir):
        public_path = storage.save_bytes(b"%PDF-1.4", ".pdf")

        target = storage.resolve_public_path(public_path)
        assert target == upload_dir / public_path.rsplit("/", 1)[-1]
        assert target.read_bytes() == b"%PDF-1.4"

        assert storage.delete_file(public_path) is True
        assert not target.exists()
        assert storage.delete_file(public_path) is False

    def test_names_do_not_collide_within_a_millisecond(self, upload_dir, monkeypatch):
        monkeypatch.setattr(storage.time, "time", lambda: 1_700_000_000.0)

        first = storage.save_bytes(b"a", ".pdf")
        second = storage.save_bytes(b"b", ".pdf")

        assert first == "/uploads/1700000000000.pdf"
        assert second == "/uploads/1700000000001.pdf"

    @pytest.mark.parametrize("path", ["", "/static/x.pdf", "/uploads/", "/uploads/../secret", "/uploads/..", "/uploads/a/b.pdf"])
    def test_foreign_paths_ignored(self, upload_dir, path):
        assert storage.resolve_public_path(path) is None
        assert storage.delete_file(path) is False

    def test_existing_file_is_never_overwritten(self, upload_dir, monkeypatch):
        monkeypatch.setattr(storage.time, "time", lambda: 1_700_000_000.0)
        taken = upload_dir / "1700000000000.pdf"
        taken.write_bytes(b"other worker")

        public_path = storage.save_bytes(b"mine", ".pdf")

        assert public_path == "/uploads/1700000000001.pdf"
        assert taken.read_bytes() == b"other worker"
