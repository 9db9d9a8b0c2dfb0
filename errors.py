"""
Application errors and their JSON rendering.

Every error body has the shape ``{"error": str, "details"?: str}``; stock
conflicts additionally carry ``productId`` and ``name``.
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logger import get_logger

logger = get_logger("errors")


class ApiError(Exception):
    status_code = 500

    def __init__(self, error: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidFilterError(ApiError):
    status_code = 400


class OutOfStockError(ApiError):
    status_code = 409

    def __init__(self, product_id: str, name: Optional[str]):
        super().__init__("Stock not available")
        self.product_id = product_id
        self.name = name

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "productId": self.product_id, "name": self.name}


class DuplicateOrderError(ApiError):
    status_code = 409

    def __init__(self):
        super().__init__("Duplicate order")


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}")
    logger.info("Rejected %s %s: %s", request.method, request.url.path, "; ".join(messages))
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": "; ".join(messages)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
