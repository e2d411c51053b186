from typing import Any, Dict, Optional


class AppError(Exception):
    """Base error rendered as a JSON ``{message}`` body by the API layer.

    Server-side errors (5xx) also carry the underlying ``error`` string.
    """

    status_code: int = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"message": self.message}
        if self.status_code >= 500:
            content["error"] = self.error or self.message
        return content


class InvalidRequestError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ServiceError(AppError):
    status_code = 500


class GenerationError(ServiceError):
    """Raised when the generative-text API cannot produce usable test cases."""

    def __init__(self, error: Optional[str] = None):
        super().__init__("Failed to generate test cases", error=error)
