"""Common data types used across the API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    statusCode: int
    error: str
    message: str


class SuccessResponse(CamelModel):
    success: bool = True
    message: str | None = None
