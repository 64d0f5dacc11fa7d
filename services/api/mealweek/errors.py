"""Error taxonomy for the meal planner API.

Every failure that crosses the HTTP edge is one of these kinds. Boundary
errors (Redis, Gemini, auth, rate limiter) are caught where they happen and
re-raised as one of these; the handlers registered in ``main.py`` render them.
"""

from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class MealPlannerError(Exception):
    status_code: int = 500
    code: str = "error"
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class Unauthorized(MealPlannerError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class Throttled(MealPlannerError):
    status_code = 429
    code = "throttled"
    default_message = "Rate limit exceeded"

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message)
        self.retry_after = max(0, int(retry_after))

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["retryAfter"] = self.retry_after
        return body


class ValidationFailed(MealPlannerError):
    status_code = 400
    code = "validation_failed"
    default_message = "Invalid request body"

    def __init__(self, message: Optional[str] = None, details: Optional[list[dict]] = None):
        super().__init__(message)
        self.details = details or []

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["details"] = self.details
        return body


class GenerationFailed(MealPlannerError):
    status_code = 502
    code = "generation_failed"
    default_message = "Failed to generate meal plan"


class NotFound(MealPlannerError):
    status_code = 404
    code = "not_found"
    default_message = "Plan not found"


class PersistenceFailed(MealPlannerError):
    status_code = 500
    code = "persistence_failed"
    default_message = "Storage operation failed"


async def meal_planner_error_handler(request: Request, exc: MealPlannerError) -> JSONResponse:
    headers = None
    if isinstance(exc, Throttled):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return await meal_planner_error_handler(request, ValidationFailed(details=details))
