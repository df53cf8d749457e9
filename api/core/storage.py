"""
On-disk storage for uploaded files.

Files live flat under `UPLOAD_DIR` and are exposed by the app at
`/uploads/<name>`. Rows in `documents.file_path` store that public path.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import HTTPException, UploadFile

from . import settings

PUBLIC_PREFIX = "/uploads/"
READ_CHUNK_BYTES = 1024 * 1024  # 1 MiB

logger = logging.getLogger(__name__)


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Buffer an upload in memory, failing with 413 once it exceeds `max_bytes`.
    """
    buf = bytearray()
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )
    return bytes(buf)


def ensure_upload_dir() -> Path:
    folder = settings.upload_dir()
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def save_bytes(data: bytes, ext: str) -> str:
    """
    Write `data` to the upload folder and return its public path.

    Names are millisecond timestamps; exclusive create bumps the stamp when
    another request (or worker) already took it.
    """
    folder = ensure_upload_dir()
    stamp = int(time.time() * 1000)
    while True:
        name = f"{stamp}{ext}"
        try:
            with open(folder / name, "xb") as fh:
                fh.write(data)
        except FileExistsError:
            stamp += 1
            continue
        return PUBLIC_PREFIX + name


def resolve_public_path(public_path: str) -> Path | None:
    """
    Map `/uploads/<name>` back to a file inside UPLOAD_DIR.

    Returns None for paths that are not ours or that would escape the folder.
    """
    if not public_path or not public_path.startswith(PUBLIC_PREFIX):
        return None
    name = public_path[len(PUBLIC_PREFIX):]
    if not name or name == ".." or Path(name).name != name:
        return None
    return settings.upload_dir() / name


def delete_file(public_path: str) -> bool:
    """
    Best-effort removal of a stored file. Returns True when a file was removed.
    """
    target = resolve_public_path(public_path)
    if target is None:
        logger.warning("stored_file_ignored path=%s", public_path)
        return False
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError:
        logger.warning("stored_file_delete_failed path=%s", target, exc_info=True)
        return False
    return True
