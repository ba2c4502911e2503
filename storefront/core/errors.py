"""Domain errors raised by the storefront services.

Routes never build error responses by hand: they let these propagate and the
handler registered in ``storefront.main`` turns them into JSON using
``ERROR_STATUS_CODES``.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    pass


class Unauthenticated(StorefrontError):
    """Raised when no valid credential was presented."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidInput(StorefrontError):
    """Raised for missing fields, empty item lists and bad status values."""

    pass


class Forbidden(StorefrontError):
    """Raised when the caller is authenticated but lacks the role or ownership."""

    pass


class Conflict(StorefrontError):
    """Raised when a unique field is already taken."""

    pass


class NotFound(StorefrontError):
    """Raised when a referenced record does not exist."""

    pass


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__("Order not found")


class UserNotFound(NotFound):
    def __init__(self, email: str):
        self.email = email
        super().__init__("User not found")


class InternalError(StorefrontError):
    """Raised when the store or another dependency fails unexpectedly."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


ERROR_STATUS_CODES: dict[type[StorefrontError], int] = {
    Unauthenticated: 401,
    InvalidInput: 400,
    Forbidden: 403,
    Conflict: 409,
    NotFound: 404,
    ProductNotFound: 404,
    OrderNotFound: 404,
    UserNotFound: 404,
    InternalError: 500,
}


def status_code_for(exc: StorefrontError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500
