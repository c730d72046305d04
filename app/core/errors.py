# app/core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Message reported for the first failing field of a request body.
FIELD_ERRORS: dict[str, str] = {
    # orders
    "cartItems": "Cart items are required",
    "deliveryAddress": "Delivery address is required",
    "mobileNumber": "Valid mobile number is required",
    "altMobileNumber": "Alternate mobile number must be text",
    "paymentMethod": "Payment method must be COD",
    "totalPrice": "Valid total price is required",
    "referralCode": "Referral code must be text",
    # referrals
    "friendEmail": "Invalid email address",
    "referralLink": "Invalid referral link",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def _first_error_message(exc: RequestValidationError) -> str:
    """
    Pick the message for the first failing field.

    Pydantic reports errors in field declaration order, so the first
    entry is the first check that failed.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    if errors[0].get("type") == "json_invalid":
        return "Invalid request body"
    loc = errors[0].get("loc", ())
    # loc looks like ("body", "cartItems", 0, "price")
    if len(loc) >= 2 and loc[0] == "body":
        if loc[1] == "cartItems" and len(loc) > 2:
            return "Invalid cart item"
        return FIELD_ERRORS.get(str(loc[1]), f"Invalid value for {loc[1]}")
    return "Invalid request body"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Shape every error as {"success": false, "error": "..."}.

      - HTTPException        -> its status code and detail
      - RequestValidationError -> 400 with the first failing field
      - anything else        -> 500, logged with traceback
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        message = _first_error_message(exc)
        logger.info(f"Rejected {request.method} {request.url.path}: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            f"Error processing {request.method} {request.url.path}: {exc}"
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
