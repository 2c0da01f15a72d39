"""FastAPI application for uploading PDFs and querying their pages."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, ValidationError

from pagefinder.config import AppConfig
from pagefinder.index.indexer import Indexer
from pagefinder.index.search import Searcher
from pagefinder.index.storage import IndexRegistry
from pagefinder.ingestion.pdf_loader import PDFExtractionError
from pagefinder.models import DocumentIndex, QueryResponse

LOGGER = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
ERROR_MESSAGE = "Error processing your request. Please try again."
_READ_CHUNK = 1 << 20


class QueryPayload(BaseModel):
    pdf_id: str = Field(alias="pdfId")
    text: str = ""

    model_config = {"populate_by_name": True}


def _response_payload(response: QueryResponse) -> Dict[str, Any]:
    return {
        "matched": response.matched,
        "text": response.response_text,
        "citations": [{"page": citation.page} for citation in response.citations],
        "queryTime": round(response.timing_millis, 3),
    }


def _document_payload(document: DocumentIndex) -> Dict[str, Any]:
    return {
        "id": document.id,
        "name": document.name,
        "url": document.source_location,
        "pages": document.page_count,
    }


async def _save_upload(upload: UploadFile, destination: Path, max_bytes: int) -> int:
    size = 0
    with destination.open("wb") as handle:
        while True:
            chunk = await upload.read(_READ_CHUNK)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                handle.close()
                destination.unlink(missing_ok=True)
                raise HTTPException(
                    status_code=413,
                    detail=f"File size exceeds {max_bytes // (1024 * 1024)}MB limit",
                )
            handle.write(chunk)
    return size


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application and the index registry it owns."""
    config = config or AppConfig.from_env()
    upload_dir = config.resolve_upload_dir(Path.cwd())

    registry = IndexRegistry(max_indexes=config.max_indexes)
    indexer = Indexer(registry)
    searcher = Searcher(
        registry,
        top_k=config.top_k,
        min_score=config.min_score,
        snippet_chars=config.snippet_chars,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        upload_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Keeping at most %d PDF indexes in memory", config.max_indexes)
        yield
        registry.clear()

    app = FastAPI(title="PageFinder", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.client_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.mount("/uploads", StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    app.state.config = config
    app.state.registry = registry
    app.state.indexer = indexer
    app.state.searcher = searcher

    @app.post("/api/upload")
    async def upload_pdf(request: Request, pdf: UploadFile | None = File(None)) -> Dict[str, Any]:
        if pdf is None:
            raise HTTPException(status_code=400, detail="No file uploaded")
        if pdf.content_type != PDF_CONTENT_TYPE:
            raise HTTPException(status_code=415, detail="Only PDF files are allowed")

        upload_dir.mkdir(parents=True, exist_ok=True)
        document_id = uuid.uuid4().hex
        destination = upload_dir / document_id
        size = await _save_upload(pdf, destination, config.max_upload_bytes)
        if size == 0:
            destination.unlink(missing_ok=True)
            raise HTTPException(status_code=400, detail="No file uploaded")

        name = pdf.filename or document_id
        url = str(request.url_for("uploads", path=document_id))
        try:
            document = await asyncio.to_thread(
                indexer.ingest_pdf,
                destination,
                document_id=document_id,
                name=name,
                source_location=url,
            )
        except PDFExtractionError as exc:
            LOGGER.error("Error processing PDF %s: %s", name, exc)
            destination.unlink(missing_ok=True)
            raise HTTPException(status_code=422, detail=f"Failed to process PDF: {exc}") from exc

        return _document_payload(document)

    @app.post("/api/query")
    async def query_document(payload: QueryPayload) -> Dict[str, Any]:
        return _response_payload(searcher.query(payload.pdf_id, payload.text))

    @app.get("/api/documents")
    async def list_documents() -> Dict[str, Any]:
        documents: List[Dict[str, Any]] = [
            _document_payload(document) for document in registry.documents()
        ]
        return {"documents": documents, "max_indexes": registry.max_indexes}

    @app.websocket("/ws")
    async def chat(websocket: WebSocket) -> None:
        await websocket.accept()
        LOGGER.info("Client connected")
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    payload = QueryPayload.model_validate(json.loads(raw))
                except (json.JSONDecodeError, ValidationError) as exc:
                    LOGGER.error("Error processing query: %s", exc)
                    await websocket.send_json({"text": ERROR_MESSAGE, "isUser": False})
                    continue

                response = searcher.query(payload.pdf_id, payload.text)
                message = _response_payload(response)
                message["isUser"] = False
                await websocket.send_json(message)
        except WebSocketDisconnect:
            LOGGER.info("Client disconnected")

    return app


app = create_app()
