"""
HTTP handlers — aiohttp views for creating and reading secrets.

Routes:
- ``POST /add`` — create a secret, return identifier and key
- ``GET /{identifier}/{key}`` — read a secret
- ``GET /health`` — liveness probe

Security Note:
    Never log request bodies, messages or keys. Reading failures are
    answered with the same 404 whatever their cause.
"""
import uuid
import logging
from typing import Any, Optional

import orjson
from aiohttp import web
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
)

from .config import MAX_EXPIRATION_HOURS
from .exceptions import InvalidInput, NotFound, PersistenceFailed, VaultError
from .service import SecretService

logger = logging.getLogger("ephemeral_vault.http")

SERVICE_KEY = web.AppKey("vault.service", SecretService)
MAX_EXPIRATION_KEY = web.AppKey("vault.max_expiration_hours", int)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID = web.RequestKey("vault.request_id", str)

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"

SECONDS_PER_HOUR = 3600


class CreateSecretRequest(BaseModel):
    """Body of ``POST /add``."""

    model_config = ConfigDict(strict=True, extra="ignore")

    message: str = Field(min_length=1)
    expiration_hours: int = Field(
        default=0,
        ge=0,
        le=MAX_EXPIRATION_HOURS,
        validation_alias=AliasChoices("expiration_hours", "expiration"),
    )
    one_time: bool = False


def _dumps(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


def ok(**payload) -> web.Response:
    return web.json_response({"status": STATUS_OK, **payload}, dumps=_dumps)


def error(message: str, status: int) -> web.Response:
    return web.json_response(
        {"status": STATUS_ERROR, "error": message}, status=status, dumps=_dumps,
    )


def validation_error(errors: list[dict[str, str]]) -> web.Response:
    return web.json_response(
        {"status": "error", "type": "validation", "errors": errors},
        status=400,
        dumps=_dumps,
    )


def format_validation_error(err: dict) -> str:
    """Turn a pydantic error entry into a user-friendly message."""
    kind = err.get("type")
    ctx = err.get("ctx") or {}
    if kind in ("missing", "string_too_short"):
        return "This field is required"
    if kind == "greater_than_equal":
        return f"Value must be greater than or equal to {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"Value must be less than or equal to {ctx.get('le')}"
    return "Invalid value"


def _field_errors(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ("body",)
        errors.append({
            "field": str(loc[0]).lower(),
            "error": format_validation_error(err),
        })
    return errors


def _decode_error_message(err: Exception) -> str:
    pos: Optional[int] = getattr(err, "pos", None)
    if isinstance(err, orjson.JSONDecodeError) and pos is not None:
        return f"Invalid JSON syntax near character {pos}."
    return "Failed to read or decode request body."


@web.middleware
async def request_id_middleware(request: web.Request, handler):
    """Tag every request (and its response) with a request id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request[REQUEST_ID] = request_id
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers[REQUEST_ID_HEADER] = request_id
        raise
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def create_secret(request: web.Request) -> web.Response:
    """Create a secret from a JSON body."""
    request_id = request[REQUEST_ID]
    service = request.app[SERVICE_KEY]
    try:
        body = await request.json(loads=orjson.loads)
    except ValueError as err:
        logger.info(
            "Failed to decode request: request_id=%s error=%s",
            request_id, type(err).__name__,
        )
        return error(_decode_error_message(err), status=400)

    if not isinstance(body, dict):
        return error("Invalid request format.", status=400)

    try:
        req = CreateSecretRequest.model_validate(body)
    except ValidationError as exc:
        logger.info(
            "Invalid request body: request_id=%s errors=%d",
            request_id, exc.error_count(),
        )
        return validation_error(_field_errors(exc))

    max_hours = request.app.get(MAX_EXPIRATION_KEY, 0)
    if max_hours and req.expiration_hours > max_hours:
        return validation_error([{
            "field": "expiration_hours",
            "error": f"Value must be less than or equal to {max_hours}",
        }])

    try:
        handle = await service.create(
            req.message,
            ttl=req.expiration_hours * SECONDS_PER_HOUR,
            one_time=req.one_time,
        )
    except InvalidInput as exc:
        return validation_error([{
            "field": exc.field or "body",
            "error": str(exc),
        }])
    except PersistenceFailed:
        logger.error("Failed to save secret: request_id=%s", request_id)
        return error("Failed to save secret", status=500)

    logger.info(
        "Secret saved: request_id=%s id=%s", request_id, handle.identifier,
    )
    return ok(identifier=handle.identifier, key=handle.key)


async def fetch_secret(request: web.Request) -> web.Response:
    """Return the message of a secret addressed by identifier and key."""
    request_id = request[REQUEST_ID]
    service = request.app[SERVICE_KEY]
    identifier = request.match_info["identifier"]
    key = request.match_info["key"]
    try:
        message = await service.retrieve(identifier, key)
    except NotFound:
        return error("Secret not found", status=404)
    except VaultError as exc:
        logger.error(
            "Failed to fetch secret: request_id=%s id=%s error=%s",
            request_id, identifier, exc,
        )
        return error("internal server error", status=500)
    return ok(message=message)


async def health(request: web.Request) -> web.Response:
    return ok()


def setup_routes(app: web.Application) -> None:
    app.router.add_get("/health", health)
    app.router.add_post("/add", create_secret)
    app.router.add_get("/{identifier}/{key}", fetch_secret)
