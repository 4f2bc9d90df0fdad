"""Error taxonomy returned (or raised) by handlers.

Handlers signal REST semantics by returning one of these as the error half of
their ``(payload, error)`` result. The formatter maps each class to a status
code and short code; anything not listed here falls through to a generic 500.
"""

from collections.abc import Sequence

from httpdispatch.schemas.error import ErrorResponse


class HandlerError(Exception):
    """Base class for all taxonomy errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidParam(HandlerError):
    """One or more request parameters have an unacceptable value."""

    def __init__(self, params: Sequence[str]) -> None:
        self.params = list(params)
        if len(self.params) > 1:
            message = f"Incorrect value for parameters: {', '.join(self.params)}"
        else:
            message = f"Incorrect value for parameter: {''.join(self.params)}"
        super().__init__(message)


class MissingParam(HandlerError):
    """One or more required request parameters were not supplied."""

    def __init__(self, params: Sequence[str]) -> None:
        self.params = list(params)
        if len(self.params) > 1:
            message = f"Parameters {', '.join(self.params)} are required for this request"
        else:
            message = f"Parameter {''.join(self.params)} is required for this request"
        super().__init__(message)


class EntityNotFound(HandlerError):
    """No entity of the given kind exists with this identifier."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"No '{entity}' found for Id: '{identifier}'")


class FileNotFound(HandlerError):
    """A requested file is absent from the given location."""

    def __init__(self, file_name: str, path: str = "") -> None:
        self.file_name = file_name
        self.path = path
        super().__init__(f"File {file_name} not found at location {path}")


class MethodMissing(HandlerError):
    """The route exists but has no handler for this HTTP method."""

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        super().__init__(f"Method '{method}' for '{url}' not defined yet")


class EntityAlreadyExists(HandlerError):
    """Not a failure: the dispatcher renders the payload as a success."""

    def __init__(self) -> None:
        super().__init__("entity already exists")


class DatabaseError(HandlerError):
    """Wraps a persistence failure. The wrapped error is logged, never shown."""

    def __init__(self, err: BaseException | None = None) -> None:
        self.err = err
        super().__init__("DB Error")


class Raw(HandlerError):
    """Escape hatch: write ``err`` as-is with ``status_code``, skipping normalization."""

    def __init__(self, status_code: int, err: BaseException | None = None) -> None:
        self.status_code = status_code
        self.err = err
        super().__init__(str(err) if err is not None else "Unknown Error")


class ResponseError(HandlerError):
    """Carries an ErrorResponse the handler built itself."""

    def __init__(self, response: ErrorResponse) -> None:
        self.response = response
        super().__init__(response.reason)


class MultipleErrors(HandlerError):
    """Ordered errors reported together under one status code."""

    def __init__(self, errors: Sequence[BaseException] = (), status_code: int = 0) -> None:
        self.errors = list(errors)
        self.status_code = status_code
        super().__init__("\n".join(str(err) for err in self.errors))
