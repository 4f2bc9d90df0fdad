"""Entry point from handler result to HTTP response.

A handler produces ``(payload, error)``. The error, unless it is None or
EntityAlreadyExists, is aggregated into a flat MultipleErrors. The payload's
type decides which writer branch gets it:

=====================================  =================================
payload                                handed to the writer as
=====================================  =================================
``payloads.Response``                  itself
``Template``, ``File``,
``RawWithOptions``                     itself
``payloads.Raw``                       its ``data`` only
anything else, including None          ``Response(data=payload)``
=====================================  =================================
"""

from typing import Any, Protocol

from starlette.responses import Response as HTTPResponse

from httpdispatch import payloads
from httpdispatch.aggregator import ErrorAggregator
from httpdispatch.context import RequestContext
from httpdispatch.exceptions import EntityAlreadyExists


class OutputWriter(Protocol):
    def respond(self, data: Any, error: BaseException | None, method: str) -> HTTPResponse: ...


class Dispatcher:
    def __init__(self, aggregator: ErrorAggregator, writer: OutputWriter) -> None:
        self.aggregator = aggregator
        self.writer = writer

    def dispatch(
        self, payload: Any, err: BaseException | None, context: RequestContext
    ) -> HTTPResponse:
        error = err
        if err is not None and not isinstance(err, EntityAlreadyExists):
            # A payload next to an error is a partial response: still reported,
            # but not counted as a server fault.
            is_partial = payload is not None
            error = self.aggregator.aggregate(err, context.path, context.method, is_partial)
            context.error_message = str(err) or type(err).__name__

        match payload:
            case payloads.Response():
                return self.writer.respond(payload, error, context.method)
            case payloads.Template() | payloads.File() | payloads.RawWithOptions():
                return self.writer.respond(payload, error, context.method)
            case payloads.Raw():
                return self.writer.respond(payload.data, error, context.method)
            case _:
                return self.writer.respond(payloads.Response(data=payload), error, context.method)
