"""Turns a single handler error into an ErrorResponse."""

from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from httpdispatch.exceptions import (
    DatabaseError,
    EntityNotFound,
    FileNotFound,
    InvalidParam,
    MethodMissing,
    MissingParam,
    ResponseError,
)
from httpdispatch.logging import LogSink
from httpdispatch.schemas.error import DateTime, ErrorResponse

DB_ERROR_REASON = "DB Error"
INTERNAL_SERVER_ERROR = "Internal Server Error"


def current_date_time() -> DateTime:
    """Now, as an RFC3339 UTC string plus the server's local zone abbreviation."""
    now = datetime.now(UTC)
    return DateTime(
        value=now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        time_zone=now.astimezone().tzname() or "UTC",
    )


def format_error(err: BaseException, logger: LogSink) -> ErrorResponse:
    """Map ``err`` onto its status code, short code and client-visible reason.

    Database failures are logged here and their text replaced with "DB Error".
    A ResponseError is returned as a copy of the caller's response; its
    timestamp is only filled in when the caller left it empty.
    MultipleErrors and Raw are the aggregator's business and are never passed in.
    """
    date_time = current_date_time()

    match err:
        case InvalidParam():
            status_code, code = 400, "Invalid Parameter"
        case MissingParam():
            status_code, code = 400, "Missing Parameter"
        case EntityNotFound():
            status_code, code = 404, "Entity Not Found"
        case FileNotFound():
            status_code, code = 404, "File Not Found"
        case MethodMissing():
            status_code, code = 405, "Method not allowed"
        case ResponseError(response=preformed):
            response = preformed.model_copy(deep=True)
            if not response.date_time.value:
                response.date_time = date_time
            return response
        case DatabaseError() | SQLAlchemyError():
            original = err.err if isinstance(err, DatabaseError) else err
            logger.error("db_error", error=str(original))
            return ErrorResponse(
                status_code=500,
                code=INTERNAL_SERVER_ERROR,
                reason=DB_ERROR_REASON,
                date_time=date_time,
            )
        case _:
            status_code, code = 500, INTERNAL_SERVER_ERROR

    return ErrorResponse(
        status_code=status_code,
        code=code,
        reason=str(err) or type(err).__name__,
        date_time=date_time,
    )
