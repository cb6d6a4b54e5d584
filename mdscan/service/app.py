"""FastAPI application entrypoint for mdscan service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..aggregate import CorpusSummary
from ..errors import ConfigError, InvalidRoot
from ..pipeline import CorpusScanner
from ..report import to_dict


class ScanRequest(BaseModel):
    path: str
    workers: Optional[int] = Field(default=None, ge=1)


class MalformedEntry(BaseModel):
    path: str
    line: int


class UnreadableEntry(BaseModel):
    path: str
    error: str


class ScanResponse(BaseModel):
    totalDocuments: int
    totalBlocks: int
    byLanguage: Dict[str, int]
    byDocument: Dict[str, int]
    byDirectory: Dict[str, int]
    malformed: List[MalformedEntry]
    unreadable: List[UnreadableEntry]
    cancelled: bool = False


class HealthResponse(BaseModel):
    status: str


def _default_scanner() -> CorpusScanner:
    return CorpusScanner()


def create_app(
    scanner_factory: Callable[[], CorpusScanner] = _default_scanner,
) -> FastAPI:
    """Create the FastAPI application exposing the corpus scan."""

    app = FastAPI(title="mdscan Service", version="0.1.0")

    async def get_scanner() -> CorpusScanner:
        # A fresh scanner per request keeps concurrent scans independent.
        return scanner_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan(
        payload: ScanRequest,
        scanner: CorpusScanner = Depends(get_scanner),
    ) -> ScanResponse:
        def _run_scan() -> CorpusSummary:
            return scanner.scan(payload.path, workers=payload.workers)

        loop = asyncio.get_running_loop()
        summary = await loop.run_in_executor(None, _run_scan)
        return ScanResponse(**to_dict(summary))

    @app.exception_handler(InvalidRoot)
    async def invalid_root_handler(_: Any, exc: InvalidRoot) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
