class AppError(Exception):
    """Base error for anything the user can fix; the UI shows the message as-is."""


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, required: int, available: int):
        super().__init__(
            f"Not enough stock for {product_name}. Required: {required}, Available: {available}"
        )
        self.product_name = product_name
        self.required = required
        self.available = available


class AuthorizationError(AppError):
    """Failed login or locked account."""
