"""Enveloppes d'erreur de l'API.

Toute erreur sortante prend la forme `{code, message, trace_id, details?}` :
- erreurs métier (`curate.domain.errors`) : statut déduit de la classe, message conservé;
- `HTTPException` et erreurs de validation de requête : code dérivé du statut;
- exceptions inattendues : 500 avec un message générique.

Un appelant anonyme sur un endpoint authentifié (`LoginRequired`) n'obtient pas d'enveloppe
mais une redirection 303 vers `LOGIN_URL`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException

from curate.core.container import container
from curate.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_FORBIDDEN,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_SEE_OTHER,
    HTTP_UNAUTHORIZED,
    HTTP_UNPROCESSABLE_ENTITY,
)
from curate.domain.errors import (
    ContentError,
    LoginRequired,
    NotFound,
    PersistenceError,
    Unauthorized,
    UpstreamError,
    ValidationError,
)

log = logging.getLogger(__name__)

TRACE_HEADERS = ("X-Trace-ID", "X-Request-ID")


class ErrorCodes:
    """Codes d'erreur exposés par l'API."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    HTTP_ERROR = "HTTP_ERROR"


_CODE_BY_STATUS = {
    HTTP_BAD_REQUEST: ErrorCodes.BAD_REQUEST,
    HTTP_UNAUTHORIZED: ErrorCodes.UNAUTHORIZED,
    HTTP_FORBIDDEN: ErrorCodes.FORBIDDEN,
    HTTP_NOT_FOUND: ErrorCodes.NOT_FOUND,
    HTTP_CONFLICT: ErrorCodes.CONFLICT,
    HTTP_UNPROCESSABLE_ENTITY: ErrorCodes.VALIDATION_ERROR,
    HTTP_INTERNAL_SERVER_ERROR: ErrorCodes.INTERNAL_ERROR,
    HTTP_BAD_GATEWAY: ErrorCodes.BAD_GATEWAY,
}

_STATUS_BY_ERROR: dict[type[ContentError], int] = {
    NotFound: HTTP_NOT_FOUND,
    Unauthorized: HTTP_FORBIDDEN,
    ValidationError: HTTP_UNPROCESSABLE_ENTITY,
    UpstreamError: HTTP_BAD_GATEWAY,
    PersistenceError: HTTP_INTERNAL_SERVER_ERROR,
}


@dataclass
class ErrorEnvelope:
    """Corps JSON d'une réponse d'erreur."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None

    def to_response(self, status_code: int) -> JSONResponse:
        content = asdict(self)
        if not self.details:
            content.pop("details")
        return JSONResponse(status_code=status_code, content=content)


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return ErrorEnvelope(code, message, trace_id, details).to_response(status_code)


def extract_trace_id(request: Request) -> str | None:
    """Identifiant de corrélation fourni par l'appelant (X-Trace-ID, sinon X-Request-ID)."""
    for header in TRACE_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return None


def status_for(exc: ContentError) -> int:
    """Statut HTTP d'une erreur métier (première classe connue dans le MRO)."""
    for klass in type(exc).__mro__:
        status = _STATUS_BY_ERROR.get(klass)
        if status is not None:
            return status
    return HTTP_INTERNAL_SERVER_ERROR


def handle_content_error(request: Request, exc: ContentError) -> JSONResponse:
    status_code = status_for(exc)
    trace_id = extract_trace_id(request)
    level = logging.ERROR if status_code >= HTTP_INTERNAL_SERVER_ERROR else logging.WARNING
    log.log(
        level,
        "domain_error",
        extra={"code": exc.code, "status_code": status_code, "trace_id": trace_id},
    )
    return create_error_response(status_code, exc.code, exc.message, trace_id)


def handle_login_required(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(url=container.settings.LOGIN_URL, status_code=HTTP_SEE_OTHER)


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    code = _CODE_BY_STATUS.get(exc.status_code, ErrorCodes.HTTP_ERROR)
    trace_id = extract_trace_id(request)
    log.warning(
        "http_error",
        extra={"code": code, "status_code": exc.status_code, "trace_id": trace_id},
    )
    return create_error_response(exc.status_code, code, str(exc.detail), trace_id)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Erreurs pydantic réduites à des champs sérialisables (loc, msg, type)."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return create_error_response(
        HTTP_UNPROCESSABLE_ENTITY,
        ErrorCodes.VALIDATION_ERROR,
        "Invalid request",
        extract_trace_id(request),
        details={"errors": jsonable_errors(exc)},
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    trace_id = extract_trace_id(request)
    log.error(
        "unexpected_error",
        extra={"trace_id": trace_id, "exception_type": type(exc).__name__},
        exc_info=exc,
    )
    return create_error_response(
        HTTP_INTERNAL_SERVER_ERROR,
        ErrorCodes.INTERNAL_ERROR,
        "An unexpected error occurred",
        trace_id,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(ContentError, handle_content_error)  # type: ignore[arg-type]
    app.add_exception_handler(LoginRequired, handle_login_required)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_generic_exception)
