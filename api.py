"""FastAPI server for Query Playground"""

import logging
from datetime import datetime, timezone
from pathlib import Path

import duckdb
from fastapi import Depends, FastAPI, File, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from constants import UPLOAD_CHUNK_BYTES, WORKBOOK_EXTENSIONS, WORKBOOK_MEDIA_TYPE
from data import Database, WorkbookStore, get_data_info
from playground import (
    ConfigurationError,
    JoinKeyNotFound,
    NotFound,
    QueryError,
    QueryRequest,
    QueryService,
    QueryTimeout,
    SheetFormatError,
    UnsafeExpression,
    UnsupportedEngine,
)
from playground.sql import RelationalEngine, SqlBuilder
import config

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Query Playground",
    description="One declarative query over DuckDB or an Excel workbook",
    version="1.0.0"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Export-Warning"],
)


# =============================================================================
# Dependencies (resolved per request from current config)
# =============================================================================

def get_database() -> Database:
    return Database(config.DATABASE_PATH, timeout=config.QUERY_TIMEOUT)


def get_workbook() -> WorkbookStore:
    return WorkbookStore(config.WORKBOOK_PATH)


def get_service(
    database: Database = Depends(get_database),
    workbook: WorkbookStore = Depends(get_workbook),
) -> QueryService:
    relational = RelationalEngine(SqlBuilder(raw_fragments=config.RAW_SQL_FRAGMENTS))
    return QueryService(database, workbook, relational=relational)


# =============================================================================
# Error mapping: messages pass through unchanged
# =============================================================================

ERROR_STATUS = [
    (NotFound, 404),
    (ConfigurationError, 500),
    (QueryTimeout, 504),
    (UnsupportedEngine, 400),
    (UnsafeExpression, 400),
    (JoinKeyNotFound, 400),
    (SheetFormatError, 400),
]


@app.exception_handler(QueryError)
async def query_error_handler(request, exc: QueryError):
    status = next((code for kind, code in ERROR_STATUS if isinstance(exc, kind)), 400)
    logger.warning(f"{type(exc).__name__}: {exc}")
    return JSONResponse(status_code=status, content={"error": type(exc).__name__, "detail": str(exc)})


@app.exception_handler(duckdb.Error)
async def duckdb_error_handler(request, exc: duckdb.Error):
    logger.warning(f"DuckDB error: {exc}")
    return JSONResponse(status_code=400, content={"error": type(exc).__name__, "detail": str(exc)})


# Response models
class TableInfo(BaseModel):
    table: str
    rows: int
    columns: int


# Endpoints
@app.get("/")
def root():
    """Health check."""
    return {"status": "ok", "service": "Query Playground", "version": "1.0"}


@app.post("/query")
def run_query(
    request: QueryRequest,
    response: Response,
    service: QueryService = Depends(get_service),
):
    """
    Execute a query on the engine it names.

    Returns the rows as a JSON list of objects. Export failures do not fail
    the request; they are reported in the X-Export-Warning header.
    """
    result = service.execute(request, timeout=config.QUERY_TIMEOUT)
    if result.warnings:
        response.headers["X-Export-Warning"] = "; ".join(result.warnings)
    return result.to_records()


@app.get("/tables", response_model=list[TableInfo])
def tables(database: Database = Depends(get_database)):
    """List relational tables with row counts."""
    df = get_data_info(database.path)
    return [
        TableInfo(table=row["table"], rows=int(row["rows"]), columns=int(row["columns"]))
        for _, row in df.iterrows()
    ]


@app.get("/workbook/sheets")
def workbook_sheets(workbook: WorkbookStore = Depends(get_workbook)) -> list[str]:
    """Sheet names of the active workbook."""
    return workbook.sheet_names()


@app.get("/workbook/latest")
def latest_workbook(workbook: WorkbookStore = Depends(get_workbook)):
    """Download the active workbook."""
    if not workbook.exists():
        raise HTTPException(status_code=404, detail="No active workbook found.")
    path = Path(workbook.path)
    return FileResponse(path, media_type=WORKBOOK_MEDIA_TYPE, filename=path.name)


@app.post("/workbook/upload")
def upload_workbook(
    file: UploadFile = File(...),
    workbook: WorkbookStore = Depends(get_workbook),
):
    """
    Upload a workbook and make it the active one.

    The original is kept in UPLOAD_DIR with a UTC timestamp suffix.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    original = Path(file.filename)
    ext = original.suffix.lower()
    if ext not in WORKBOOK_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Only Excel files ({', '.join(WORKBOOK_EXTENSIONS)}) are supported.",
        )

    upload_dir = Path(config.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    upload_path = upload_dir / f"{original.stem}_{timestamp}{ext}"

    size = 0
    with open(upload_path, "wb") as out:
        while True:
            chunk = file.file.read(UPLOAD_CHUNK_BYTES)
            if not chunk:
                break
            size += len(chunk)
            if size > config.MAX_UPLOAD_BYTES:
                break
            out.write(chunk)

    if size == 0 or size > config.MAX_UPLOAD_BYTES:
        upload_path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail=f"Upload must be 1..{config.MAX_UPLOAD_BYTES} bytes.")

    try:
        active = workbook.install(upload_path)
    except QueryError:
        raise
    except Exception as e:
        upload_path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail=f"Not a readable workbook: {e}")

    logger.info(f"Uploaded {file.filename} ({size} bytes) → {active}")
    return {
        "message": "Workbook uploaded successfully.",
        "originalName": file.filename,
        "uploadPath": str(upload_path),
        "activeWorkbook": str(active),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
