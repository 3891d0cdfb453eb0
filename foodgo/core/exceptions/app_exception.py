from fastapi import HTTPException
from typing import Optional, Any

from foodgo.core.exceptions.order_errors import FoodGoError, RestaurantConflictError


class AppHttpException(HTTPException):
    def __init__(
        self,
        status_code: int,
        detail: str,
        solution: Optional[str] = None,
        errors: Optional[Any] = None,
    ):
        content = {
            "detail": detail,
        }
        if solution:
            content["solution"] = solution
        if errors:
            content["errors"] = errors

        super().__init__(status_code=status_code, detail=content)
        self.status_code = status_code
        self.solution = solution
        self.errors = errors
        self.content = content

    @classmethod
    def from_error(cls, error: FoodGoError) -> "AppHttpException":
        errors = None
        if isinstance(error, RestaurantConflictError):
            errors = {
                "current_restaurant": error.current_restaurant,
                "incoming_restaurant": error.incoming_restaurant,
            }
        return cls(
            status_code=error.status_code,
            detail=error.detail,
            solution=error.solution,
            errors=errors,
        )
