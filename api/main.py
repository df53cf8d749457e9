import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from core import db, settings, storage
from documents import repository as document_repository
from documents import router as documents_router
from search import router as search_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # One DB pool per process; the table is created on first boot.
    await db.init_pool()
    await document_repository.ensure_schema()
    logger.info("startup upload_dir=%s", settings.upload_dir())
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router.router, tags=["documents"])
app.include_router(search_router.router, tags=["search"])

# StaticFiles checks the directory at mount time, so create it up front.
app.mount("/uploads", StaticFiles(directory=storage.ensure_upload_dir()), name="uploads")


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/{path:path}", include_in_schema=False)
def frontend(path: str) -> FileResponse:
    """
    Serve the single-page frontend: real files as-is, anything else gets
    index.html so client-side routes survive a reload.
    """
    root = settings.public_dir().resolve()
    if path:
        candidate = (root / path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)

    index = root / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found.")
    return FileResponse(index)
