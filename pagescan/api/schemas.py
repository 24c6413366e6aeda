"""Request/response Pydantic models."""

from pydantic import BaseModel, Field, HttpUrl


class NormalizeRequest(BaseModel):
    url: HttpUrl = Field(description="URL the HTML was retrieved from; used to resolve image links")
    html: str = Field(description="Raw HTML of the rendered page")


class ErrorResponse(BaseModel):
    detail: str
