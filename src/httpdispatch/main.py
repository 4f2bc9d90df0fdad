"""Application shell: routes handlers through the dispatcher.

Usage::

    app = App()

    async def get_user(ctx: Context) -> tuple[Any, BaseException | None]:
        user_id = ctx.path_param("id")
        if user_id != "1":
            return None, EntityNotFound("user", user_id)
        return {"id": 1, "name": "Ada"}, None

    app.get("/user/{id}", get_user)

    # uvicorn module:app
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from httpdispatch.aggregator import ErrorAggregator
from httpdispatch.config import Settings
from httpdispatch.context import REQUEST_CONTEXT_KEY, Context, RequestContext
from httpdispatch.dispatcher import Dispatcher
from httpdispatch.exceptions import MethodMissing
from httpdispatch.logging import LogSink, get_logger
from httpdispatch.metrics import CounterSink, MetricsReporter, PrometheusCounterSink
from httpdispatch.middleware import RequestIDMiddleware
from httpdispatch.pubsub import PublisherSubscriber
from httpdispatch.responder import ResponseWriter

HandlerResult = tuple[Any, BaseException | None]
Handler = Callable[[Context], Awaitable[HandlerResult] | HandlerResult]


class App:
    """A FastAPI application whose routes return ``(payload, error)``.

    The counter and log sinks are built once here and shared by every request;
    pass your own to substitute them (tests use in-memory fakes).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        counter: CounterSink | None = None,
        logger: LogSink | None = None,
        registry: CollectorRegistry | None = None,
        pubsub: PublisherSubscriber | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.logger: Any = logger or get_logger("httpdispatch")
        self.registry = registry or CollectorRegistry()
        self.pubsub = pubsub
        self.counter = counter or PrometheusCounterSink(
            self.settings.metrics_namespace,
            self.settings.error_counter_name,
            registry=self.registry,
        )

        reporter = MetricsReporter(self.counter, self.logger)
        self.dispatcher = Dispatcher(
            ErrorAggregator(reporter, self.logger),
            ResponseWriter(self.settings.template_directory, self.logger),
        )

        self.fastapi = FastAPI(title=self.settings.app_name)
        self.fastapi.add_middleware(RequestIDMiddleware)
        self.fastapi.add_exception_handler(StarletteHTTPException, self._http_exception)
        self.fastapi.add_api_route(
            self.settings.metrics_path, self._metrics, methods=["GET"], include_in_schema=False
        )
        self.get(self.settings.health_path, self._health)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.fastapi(scope, receive, send)

    def get(self, path: str, handler: Handler) -> None:
        self.add_route("GET", path, handler)

    def post(self, path: str, handler: Handler) -> None:
        self.add_route("POST", path, handler)

    def put(self, path: str, handler: Handler) -> None:
        self.add_route("PUT", path, handler)

    def patch(self, path: str, handler: Handler) -> None:
        self.add_route("PATCH", path, handler)

    def delete(self, path: str, handler: Handler) -> None:
        self.add_route("DELETE", path, handler)

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        async def endpoint(request: Request) -> Response:
            return await self.serve(handler, request)

        endpoint.__name__ = getattr(handler, "__name__", endpoint.__name__)
        self.fastapi.add_api_route(path, endpoint, methods=[method])

    async def serve(self, handler: Handler, request: Request) -> Response:
        """Run ``handler`` for ``request`` and write whatever it produced.

        A handler that raises is treated as having returned ``(None, exc)``.
        """
        route = request.scope.get("route")
        template = route.path if route is not None else request.url.path
        context = self._bind_context(request, template.removesuffix("/"))

        ctx = Context(request, self.logger, self.pubsub)
        try:
            if inspect.iscoroutinefunction(handler):
                payload, err = await handler(ctx)
            else:
                payload, err = await run_in_threadpool(handler, ctx)
        except Exception as exc:
            payload, err = None, exc

        return self.dispatcher.dispatch(payload, err, context)

    async def _http_exception(self, request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code != 405:
            return await http_exception_handler(request, exc)

        context = self._bind_context(request, request.url.path.removesuffix("/"))
        response = self.dispatcher.dispatch(
            None, MethodMissing(request.method, request.url.path), context
        )
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    def _health(self, _ctx: Context) -> HandlerResult:
        health: dict[str, Any] = {"status": "UP"}
        if self.pubsub is not None:
            health["pubsub"] = self.pubsub.health_check()
        return health, None

    async def _metrics(self) -> Response:
        return Response(generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)

    @staticmethod
    def _bind_context(request: Request, path: str) -> RequestContext:
        context = RequestContext(path=path, method=request.method)
        setattr(request.state, REQUEST_CONTEXT_KEY, context)
        return context
