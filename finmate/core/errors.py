class FinmateError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(FinmateError):
    status_code = 400
    message = "Bad request"


class UnauthorizedError(FinmateError):
    status_code = 401
    message = "Authorization denied"


class ForbiddenError(FinmateError):
    status_code = 403
    message = "User not authorized"


class NotFoundError(FinmateError):
    status_code = 404
    message = "Not found"


class ConflictError(FinmateError):
    status_code = 409
    message = "Conflict"


class UpstreamError(FinmateError):
    """An external provider (LLM, OCR) failed; no stored data was touched."""
    status_code = 502
    message = "External service unavailable"
