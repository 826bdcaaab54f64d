from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Metadata(BaseModel):
    """Metadata envelope attached to every result, successful or not."""

    title: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None  # at most 10, document order
    links: Optional[List[str]] = None  # at most 20, document order
    timestamp: str = Field(default_factory=utc_timestamp)


class StructuredData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    headings: List[str] = Field(default_factory=list)
    lists: List[str] = Field(default_factory=list)
    tables: List[str] = Field(default_factory=list)
    forms: List[str] = Field(default_factory=list)
    json_ld: List[Any] = Field(default_factory=list, alias="jsonLd")


class ScrapeResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    url: str
    content: str = ""
    metadata: Metadata = Field(default_factory=Metadata)
    structured_data: Optional[StructuredData] = Field(default=None, alias="structuredData")
    error: Optional[str] = None

    @model_validator(mode="after")
    def _error_iff_failure(self) -> "ScrapeResult":
        if self.success and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("a failed result must carry a non-empty error")
        return self

    @classmethod
    def failure(cls, url: str, error: str) -> "ScrapeResult":
        """Uniform failure result: empty content and a timestamp-only envelope."""
        return cls(success=False, url=url, content="", metadata=Metadata(), error=error)

    def to_json(self) -> dict:
        """Serialise with camelCase keys, omitting absent optional fields."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        # exclude_none also reaches into dicts; JSON-LD payloads keep their nulls
        if self.structured_data is not None:
            data["structuredData"]["jsonLd"] = self.structured_data.json_ld
        return data
