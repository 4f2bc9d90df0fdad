"""Error response schemas.

Single errors are written as one ErrorResponse object, multiple errors as a
JSON array of them. Field names on the wire are camelCase (``statusCode``,
``dateTime``, ``timeZone``); optional enrichment fields are omitted when unset.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DateTime(BaseModel):
    """When the response was generated: RFC3339 UTC value plus local zone name."""

    model_config = ConfigDict(populate_by_name=True)

    value: str = ""
    time_zone: str = Field(default="", alias="timeZone")


class ErrorResponse(BaseModel):
    """Normalized representation of one error. ``status_code`` 0 means unset."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(default=0, alias="statusCode")
    code: str = ""
    reason: str = ""
    resource_id: str | None = Field(default=None, alias="resourceID")
    path: str | None = None
    root_causes: list[dict[str, Any]] | None = Field(default=None, alias="rootCauses")
    date_time: DateTime = Field(default_factory=DateTime, alias="dateTime")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
