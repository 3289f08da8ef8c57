from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...api import api_state, call_api, get_api_function, get_api_functions
from ...domain import AgendaError, NotFound, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

app = FastAPI(title="Podium Agenda API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# First match wins; subclasses before AgendaError.
_ERROR_STATUS: Tuple[Tuple[Type[AgendaError], int], ...] = (
    (ValidationError, 422),
    (NotFound, 404),
    (StoreUnavailable, 503),
    (AgendaError, 500),
)


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _error_detail(exc: AgendaError) -> Any:
    if isinstance(exc, ValidationError):
        return {"message": str(exc), "fields": list(exc.fields)}
    if isinstance(exc, NotFound):
        return {"message": str(exc), "event_id": exc.event_id}
    return str(exc)


@app.exception_handler(AgendaError)
async def agenda_error_handler(request: Request, exc: AgendaError) -> JSONResponse:
    status = next(code for kind, code in _ERROR_STATUS if isinstance(exc, kind))
    if status >= 500:
        logger.error("%s failed: %s", request.url.path, exc)
    else:
        logger.info("%s rejected: %s", request.url.path, exc)
    return JSONResponse({"detail": _error_detail(exc)}, status_code=status)


@app.get("/health")
async def health() -> JSONResponse:
    storage = api_state.context.settings.storage
    return JSONResponse({"status": "ok", "backend": storage.backend})


@app.get("/api/functions")
async def list_api_functions(category: Optional[str] = None) -> JSONResponse:
    functions = [func.describe() for func in get_api_functions(category)]
    return JSONResponse({"functions": functions})


@app.get("/api/functions/{function_name}")
async def describe_api_function(function_name: str) -> JSONResponse:
    try:
        api_function = get_api_function(function_name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return JSONResponse(api_function.describe())


@app.post("/api/functions/{function_name}")
async def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
    try:
        get_api_function(function_name)
    except KeyError as exc:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    try:
        result = await call_api(function_name, **request.arguments)
    except (TypeError, ValueError) as exc:
        logger.warning("API function %s rejected arguments: %s", function_name, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    config.accesslog = "-"
    logger.info("Serving Podium Agenda API on %s:%d (%s store)", host, port, api_state.context.settings.storage.backend)
    asyncio.run(serve(app, config))
