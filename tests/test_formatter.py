"""Unit tests for mapping single errors onto ErrorResponse."""

import re

import pytest
from sqlalchemy.exc import OperationalError

from httpdispatch.exceptions import (
    DatabaseError,
    EntityNotFound,
    FileNotFound,
    InvalidParam,
    MethodMissing,
    MissingParam,
    ResponseError,
)
from httpdispatch.formatter import format_error
from httpdispatch.schemas.error import DateTime, ErrorResponse
from tests.fakes import RecordingLogger

RFC3339_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


class QuotaExceeded(Exception):
    pass


@pytest.mark.parametrize(
    "err, status_code, code, reason",
    [
        (InvalidParam(["limit"]), 400, "Invalid Parameter", "Incorrect value for parameter: limit"),
        (
            InvalidParam(["limit", "skip"]),
            400,
            "Invalid Parameter",
            "Incorrect value for parameters: limit, skip",
        ),
        (MissingParam(["id"]), 400, "Missing Parameter", "Parameter id is required for this request"),
        (
            MissingParam(["id", "name"]),
            400,
            "Missing Parameter",
            "Parameters id, name are required for this request",
        ),
        (EntityNotFound("user", 42), 404, "Entity Not Found", "No 'user' found for Id: '42'"),
        (
            FileNotFound("index.html", "./static"),
            404,
            "File Not Found",
            "File index.html not found at location ./static",
        ),
        (
            MethodMissing("PUT", "/user"),
            405,
            "Method not allowed",
            "Method 'PUT' for '/user' not defined yet",
        ),
        (QuotaExceeded("quota exceeded"), 500, "Internal Server Error", "quota exceeded"),
    ],
    ids=[
        "invalid_param",
        "invalid_params",
        "missing_param",
        "missing_params",
        "entity_not_found",
        "file_not_found",
        "method_missing",
        "unclassified",
    ],
)
def test_taxonomy_mapping(
    err: Exception, status_code: int, code: str, reason: str, log: RecordingLogger
) -> None:
    response = format_error(err, log)
    assert response.status_code == status_code
    assert response.code == code
    assert response.reason == reason


def test_every_formatted_error_is_timestamped(log: RecordingLogger) -> None:
    response = format_error(EntityNotFound("user", 1), log)
    assert RFC3339_UTC.match(response.date_time.value)
    assert response.date_time.time_zone


def test_unclassified_error_without_message_uses_class_name(log: RecordingLogger) -> None:
    response = format_error(QuotaExceeded(), log)
    assert response.status_code == 500
    assert response.reason == "QuotaExceeded"


def test_database_error_is_redacted_and_logged(log: RecordingLogger) -> None:
    response = format_error(DatabaseError(Exception("row not found")), log)

    assert response.status_code == 500
    assert response.code == "Internal Server Error"
    assert response.reason == "DB Error"
    assert "row not found" not in response.model_dump_json()
    assert log.named("db_error") == [{"level": "error", "event": "db_error", "error": "row not found"}]


def test_sqlalchemy_error_is_treated_as_database_error(log: RecordingLogger) -> None:
    err = OperationalError("SELECT 1", {}, Exception("connection refused"))
    response = format_error(err, log)

    assert response.status_code == 500
    assert response.reason == "DB Error"
    assert len(log.named("db_error")) == 1


def test_preformed_response_without_timestamp_gets_one(log: RecordingLogger) -> None:
    preformed = ErrorResponse(status_code=409, code="Conflict", reason="version mismatch")
    response = format_error(ResponseError(preformed), log)

    assert response.status_code == 409
    assert response.code == "Conflict"
    assert response.reason == "version mismatch"
    assert RFC3339_UTC.match(response.date_time.value)
    assert response.date_time.time_zone
    # caller's object is left alone
    assert preformed.date_time.value == ""


def test_preformed_response_keeps_its_timestamp(log: RecordingLogger) -> None:
    stamp = DateTime(value="2021-03-04T05:06:07Z", time_zone="IST")
    preformed = ErrorResponse(status_code=422, code="Unprocessable", reason="bad", date_time=stamp)

    response = format_error(ResponseError(preformed), log)

    assert response.date_time == stamp


def test_error_response_wire_format_uses_camel_case_and_omits_unset() -> None:
    response = ErrorResponse(
        status_code=404,
        code="Entity Not Found",
        reason="gone",
        resource_id="42",
        date_time=DateTime(value="2021-03-04T05:06:07Z", time_zone="UTC"),
    )
    assert response.to_wire() == {
        "statusCode": 404,
        "code": "Entity Not Found",
        "reason": "gone",
        "resourceID": "42",
        "dateTime": {"value": "2021-03-04T05:06:07Z", "timeZone": "UTC"},
    }
