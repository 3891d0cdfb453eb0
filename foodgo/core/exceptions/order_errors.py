from typing import Optional


class FoodGoError(Exception):
    """Base class for errors raised by the ordering core."""

    status_code = 400
    solution: Optional[str] = None

    def __init__(self, detail: str, solution: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if solution is not None:
            self.solution = solution


class ValidationError(FoodGoError):
    """Malformed checkout or cart input (empty cart, missing restaurant, ...)."""

    status_code = 422


class NotFoundError(FoodGoError):
    status_code = 404


class ConflictError(FoodGoError):
    status_code = 409


class RestaurantConflictError(ConflictError):
    """The cart already holds items from another restaurant."""

    solution = "Confirm to clear your cart and start a new one."

    def __init__(self, current_restaurant: str, incoming_restaurant: str):
        super().__init__(f'A new order will clear your cart with "{current_restaurant}"')
        self.current_restaurant = current_restaurant
        self.incoming_restaurant = incoming_restaurant


class TransitionConflictError(ConflictError):
    """The order store refused a status transition."""


class CancelError(FoodGoError):
    status_code = 409


class CancelWindowClosedError(CancelError):
    def __init__(self, window_seconds: int = 20):
        super().__init__(f"You cannot cancel your order after {window_seconds} seconds of placement.")
        self.window_seconds = window_seconds


class CancelTerminalStateError(CancelError):
    def __init__(self, status: str):
        super().__init__(f"This order is already {status.replace('_', ' ')} and can no longer be cancelled.")
        self.status = status


class BackendUnavailableError(FoodGoError):
    status_code = 503
    solution = "Please try again in a moment."
