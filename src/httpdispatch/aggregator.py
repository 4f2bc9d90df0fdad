"""Flattens whatever a handler returned as its error into one MultipleErrors."""

from sqlalchemy.exc import SQLAlchemyError

from httpdispatch.exceptions import DatabaseError, MultipleErrors, Raw, ResponseError
from httpdispatch.formatter import format_error
from httpdispatch.logging import LogSink
from httpdispatch.metrics import DB_ERROR_LABEL, UNKNOWN_ERROR_LABEL, ErrorLabel, MetricsReporter


def _is_raw(result: MultipleErrors) -> bool:
    return len(result.errors) == 1 and isinstance(result.errors[0], Raw)


class ErrorAggregator:
    """Resolves handler errors into ErrorResponses and reports server faults as it goes."""

    def __init__(self, reporter: MetricsReporter, logger: LogSink) -> None:
        self.reporter = reporter
        self.logger = logger

    def aggregate(
        self, err: BaseException, path: str, method: str, is_partial: bool
    ) -> MultipleErrors:
        """Resolve ``err`` into a flat MultipleErrors of ErrorResponse errors.

        Nested MultipleErrors are flattened depth-first, preserving order, and the
        result keeps the outermost declared status code. A Raw error anywhere in
        the tree ends aggregation: the result holds only that Raw, at its own
        status code, and any siblings are dropped.
        """
        match err:
            case MultipleErrors():
                flattened: list[BaseException] = []
                for child in err.errors:
                    result = self.aggregate(child, path, method, is_partial)
                    if _is_raw(result):
                        return result
                    flattened.extend(result.errors)
                return MultipleErrors(flattened, status_code=err.status_code)
            case Raw():
                return MultipleErrors([err], status_code=err.status_code)

        response = format_error(err, self.logger)
        label_type = (
            DB_ERROR_LABEL
            if isinstance(err, DatabaseError | SQLAlchemyError)
            else UNKNOWN_ERROR_LABEL
        )
        # a preformed response always counts as a fault, whatever status it carries
        reported = (
            response.model_copy(update={"status_code": 0})
            if isinstance(err, ResponseError)
            else response
        )
        self.reporter.report(is_partial, reported, ErrorLabel(label_type, path, method))

        return MultipleErrors([ResponseError(response)], status_code=response.status_code)
