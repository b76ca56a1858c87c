"""
Domain errors raised by the service layer.

Each error carries an ``errors`` mapping (field -> message) and the
HTTP status an API layer is expected to translate it to.  Services
raise these where the condition is detected and never catch them.
"""
from http import HTTPStatus


class ConduitError(Exception):
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class NotFoundError(ConduitError):
    status = HTTPStatus.NOT_FOUND

    def __init__(self, entity: str, field: str, value) -> None:
        super().__init__(
            f"{entity} with {field}={value!r} not found",
            {field: f"{entity} not found"},
        )
        self.entity = entity


class UnauthorizedError(ConduitError):
    status = HTTPStatus.UNAUTHORIZED


class SlugCollisionError(ConduitError):
    status = HTTPStatus.CONFLICT

    def __init__(self, title: str, attempts: int) -> None:
        super().__init__(
            f"Could not generate a unique slug for {title!r} after {attempts} attempts",
            {"slug": "Slug already taken"},
        )
