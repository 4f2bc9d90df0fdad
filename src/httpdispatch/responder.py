"""Output writer: turns dispatch results into Starlette responses."""

import json
import string
from http import HTTPStatus
from pathlib import Path
from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.responses import Response as HTTPResponse

from httpdispatch import payloads
from httpdispatch.exceptions import FileNotFound, MultipleErrors, Raw, ResponseError
from httpdispatch.formatter import format_error
from httpdispatch.logging import LogSink
from httpdispatch.schemas.error import ErrorResponse


def finalize(response: ErrorResponse) -> ErrorResponse:
    """Fill in what a client must always see: a real status code and a reason."""
    status_code = response.status_code or HTTPStatus.INTERNAL_SERVER_ERROR
    reason = response.reason or response.code or _phrase(status_code)
    return response.model_copy(update={"status_code": int(status_code), "reason": reason})


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Error"


def success_status(method: str) -> int:
    """201 for a successful POST, 200 otherwise."""
    return HTTPStatus.CREATED if method == "POST" else HTTPStatus.OK


class ResponseWriter:
    """Serializes error results and success payloads into Starlette responses."""

    def __init__(self, template_directory: str, logger: LogSink) -> None:
        self.template_directory = template_directory
        self.logger = logger

    def respond(self, data: Any, error: BaseException | None, method: str) -> HTTPResponse:
        """Write ``error`` when it is an aggregated MultipleErrors, else ``data``.

        Any other error (None or EntityAlreadyExists) counts as success.
        """
        if isinstance(error, MultipleErrors):
            return self.write_errors(error)
        return self.write_data(data, method)

    def write_errors(self, errors: MultipleErrors) -> HTTPResponse:
        if len(errors.errors) == 1:
            only = errors.errors[0]
            if isinstance(only, Raw):
                return PlainTextResponse(
                    only.message, status_code=only.status_code or HTTPStatus.INTERNAL_SERVER_ERROR
                )
            response = self._error_response(only)
            return JSONResponse(
                response.to_wire(), status_code=errors.status_code or response.status_code
            )

        return JSONResponse(
            [self._error_response(err).to_wire() for err in errors.errors],
            status_code=errors.status_code or HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    def write_data(self, data: Any, method: str) -> HTTPResponse:
        match data:
            case payloads.Response(data=None, meta=None) if method == "DELETE":
                return HTTPResponse(status_code=HTTPStatus.NO_CONTENT)
            case payloads.Response():
                body: dict[str, Any] = {"data": data.data}
                if data.meta is not None:
                    body["meta"] = data.meta
                return JSONResponse(jsonable_encoder(body), status_code=success_status(method))
            case payloads.Template():
                return self._render_template(data)
            case payloads.File():
                return HTTPResponse(data.content, media_type=data.content_type)
            case payloads.RawWithOptions():
                content = data.data
                if not isinstance(content, str | bytes):
                    content = json.dumps(jsonable_encoder(content))
                return HTTPResponse(
                    content,
                    status_code=success_status(method),
                    headers=data.headers,
                    media_type=data.content_type,
                )
            case None if method == "DELETE":
                return HTTPResponse(status_code=HTTPStatus.NO_CONTENT)
            case _:
                return JSONResponse(jsonable_encoder(data), status_code=success_status(method))

    def _error_response(self, err: BaseException) -> ErrorResponse:
        if isinstance(err, ResponseError):
            return finalize(err.response)
        return finalize(format_error(err, self.logger))

    def _render_template(self, template: payloads.Template) -> HTTPResponse:
        directory = Path(template.directory or self.template_directory)
        path = directory / template.file
        if not path.is_file():
            err = FileNotFound(template.file, str(directory))
            missing = finalize(format_error(err, self.logger))
            return JSONResponse(missing.to_wire(), status_code=missing.status_code)

        body = string.Template(path.read_text(encoding="utf-8")).safe_substitute(template.data)
        return HTTPResponse(body, media_type=template.content_type)
