"""Per-request objects: what handlers see, and what the dispatcher records."""

from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from starlette.requests import Request
from structlog.stdlib import BoundLogger

from httpdispatch.exceptions import InvalidParam, MissingParam
from httpdispatch.pubsub import PublisherSubscriber

REQUEST_CONTEXT_KEY = "request_context"

M = TypeVar("M", bound=BaseModel)


@dataclass
class RequestContext:
    """Resolved route of the current request plus the error it ended with.

    Lives on ``request.state`` so the access-log middleware can read
    ``error_message`` after the response is written.
    """

    path: str
    method: str
    error_message: str | None = None


def request_context(request: Request) -> RequestContext | None:
    return getattr(request.state, REQUEST_CONTEXT_KEY, None)


class Context:
    """Handed to every handler."""

    def __init__(
        self,
        request: Request,
        logger: BoundLogger,
        pubsub: PublisherSubscriber | None = None,
    ) -> None:
        self.request = request
        self.logger = logger
        self.pubsub = pubsub

    def param(self, name: str) -> str:
        return self.request.query_params.get(name, "")

    def params(self, name: str) -> list[str]:
        return self.request.query_params.getlist(name)

    def path_param(self, name: str) -> str:
        return str(self.request.path_params.get(name, ""))

    def header(self, name: str) -> str:
        return self.request.headers.get(name, "")

    async def body(self) -> bytes:
        return await self.request.body()

    async def bind(self, model: type[M]) -> M:
        """Parse the JSON body into ``model``.

        Raises MissingParam for an empty body and InvalidParam naming the
        offending fields when validation fails.
        """
        raw = await self.request.body()
        if not raw:
            raise MissingParam(["body"])
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            fields = [
                ".".join(str(part) for part in error["loc"]) or "body" for error in exc.errors()
            ]
            raise InvalidParam(fields) from exc

    def __repr__(self) -> str:
        return f"Context(method={self.request.method!r}, path={self.request.url.path!r})"
