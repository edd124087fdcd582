"""Exception handlers mapping registry errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from referral_registry.domain.ports import ReferralNotFoundError

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Invalid input"


async def referral_not_found_handler(request: Request, exc: ReferralNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": ReferralNotFoundError.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, a non-object body, a mistyped field or a non-integer id all end up here."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    logger.warning(f"Invalid input on {request.method} {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": INVALID_INPUT_MESSAGE, "errors": jsonable_encoder(errors)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReferralNotFoundError, referral_not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
