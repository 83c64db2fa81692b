"""Error taxonomy shared by the store, auth and analytics layers.

Handlers raise these; the app maps them to JSON bodies:

- `{"error": "<detail>"}` for single errors
- `{"errors": [...]}` for multi-field validation failures
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError


def _debug(msg: str) -> None:
    print(f"[errors] {msg}")


class ApiError(Exception):
    status_code = 500

    def __init__(self, detail: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.detail = detail
        self.errors = errors

    def body(self) -> Dict[str, Any]:
        if self.errors:
            return {"errors": self.errors}
        return {"error": self.detail}


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class StoreError(ApiError):
    status_code = 500


def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Cookie"}
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)


_LOC_SOURCES = ("body", "query", "path", "header", "cookie")


def _field_from_loc(loc: Any) -> str:
    parts = list(loc or ())
    source = "body"
    if parts and parts[0] in _LOC_SOURCES:
        source = str(parts.pop(0))
    # Only positional parts left (e.g. a JSON decode offset): blame the source.
    if not any(isinstance(p, str) for p in parts):
        return source
    return ".".join(str(p) for p in parts)


def field_errors(errors: Sequence[Any]) -> List[Dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts to `{"field", "msg"}` pairs."""
    return [
        {"field": _field_from_loc(e.get("loc")), "msg": str(e.get("msg") or "invalid")}
        for e in errors
    ]


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": field_errors(exc.errors())})


def _store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    _debug(f"store failure on {request.method} {request.url.path}: {exc!r}")
    err = StoreError("store_error")
    return JSONResponse(status_code=err.status_code, content=err.body())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(PyMongoError, _store_error_handler)
