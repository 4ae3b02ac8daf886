from __future__ import annotations

import contextlib
import os
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mygm.core.audit import emit, log
from mygm.core.db import db_health, init_db
from mygm.modules.catalog.router import router as catalog_router
from mygm.modules.dashboard.router import router as dashboard_router
from mygm.modules.finance.router import router as finance_router
from mygm.modules.planner.router import router as planner_router
from mygm.modules.resolution.router import router as resolution_router
from mygm.modules.rivalries.router import router as rivalries_router
from mygm.modules.roster.router import router as roster_router
from mygm.modules.saves.router import router as saves_router
from mygm.modules.titles.router import router as titles_router

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

_last_error: Dict[str, Any] = {}


@contextlib.asynccontextmanager
async def _lifespan(_app: FastAPI):
    init_db()
    emit("info", "app.startup", "schema at head", module=__name__, version=APP_VERSION)
    yield


app = FastAPI(title="MyGM Simulation API", version=APP_VERSION, lifespan=_lifespan)

# Contract locks:
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        },
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}", rid, __name__)
    return resp


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    # DomainError detail: {"error", "message", "details"}
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        d = exc.detail
        return _err_envelope(str(d["error"]), str(d.get("message", "")), rid, d.get("details") or {}, exc.status_code)
    return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("validation_error", "request validation failed", rid, {"errors": jsonable_encoder(exc.errors())}, 422)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    rid = getattr(request.state, "request_id", None)
    log.exception("unhandled error (request_id=%s)", rid)
    _last_error.update({"type": type(exc).__name__, "message": str(exc), "request_id": rid})
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)


app.include_router(catalog_router)
app.include_router(saves_router)
app.include_router(roster_router)
app.include_router(titles_router)
app.include_router(planner_router)
app.include_router(resolution_router)
app.include_router(rivalries_router)
app.include_router(finance_router)
app.include_router(dashboard_router)


@app.get("/health")
def health():
    db = db_health()
    return {
        "status": "ok" if db["status"] == "ok" else "degraded",
        "version": APP_VERSION,
        "db": db,
        "last_error_summary": dict(_last_error) or None,
    }
