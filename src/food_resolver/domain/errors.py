"""Typed errors raised while resolving food data."""


class FoodDatabaseError(Exception):
    """Base error for food database lookups."""

    kind = "food_database_error"
    description = "Food database error"
    recovery_suggestion = "Please try again"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.description)

    @property
    def detail(self) -> str:
        """Human readable description of the failure."""
        return str(self)


class InvalidBarcodeError(FoodDatabaseError):
    """The barcode could not be turned into a request."""

    kind = "invalid_barcode"
    description = "Invalid barcode format"


class InvalidQueryError(FoodDatabaseError):
    """The search query is unusable."""

    kind = "invalid_query"
    description = "Invalid search query"


class InvalidResponseError(FoodDatabaseError):
    """The upstream answered with a payload of an unexpected shape."""

    kind = "invalid_response"
    description = "Invalid response from server"


class ProductNotFoundError(FoodDatabaseError):
    """The upstream has no product for the barcode."""

    kind = "product_not_found"
    description = "Product not found in database"
    recovery_suggestion = "Try scanning again or add the food manually"


class ApiError(FoodDatabaseError):
    """The upstream returned a non-2xx status other than 404."""

    kind = "api_error"

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Server error (status {status_code})")


class NetworkError(FoodDatabaseError):
    """Transport failure or timeout talking to the upstream."""

    kind = "network_error"
    recovery_suggestion = "Check your internet connection"

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class DecodingError(FoodDatabaseError):
    """The upstream body is not valid JSON or does not match the schema."""

    kind = "decoding_error"
    description = "Failed to parse product data"

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__()
