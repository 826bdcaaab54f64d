from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ExtractMode = Literal["text", "html", "structured"]

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_MS = 10_000


def _alias(camel: str, snake: str, *legacy: str) -> dict:
    """Accept camelCase, snake_case and legacy keys; serialise as camelCase."""
    return {
        "validation_alias": AliasChoices(camel, snake, *legacy),
        "serialization_alias": camel,
    }


class ScrapeRequest(BaseModel):
    """A fully-specified scrape request.

    Build one through :func:`scrapeai.services.validator.validate_config`
    rather than directly, so that missing fields receive their defaults.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str
    selector: Optional[str] = None
    """Accepted for compatibility; extraction does not use it."""

    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, **_alias("maxRetries", "max_retries"))
    """Accepted but inert: the engine never retries."""

    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, **_alias("timeoutMs", "timeout_ms", "timeout")
    )
    allow_scripted: bool = Field(default=True, **_alias("allowScripted", "allow_scripted", "javascript"))
    """Accepted but not enforced; scripts on fetched pages are never executed."""

    extract_mode: ExtractMode = Field(default="text", **_alias("extractMode", "extract_mode"))
    ai_prompts: List[str] = Field(default_factory=list, **_alias("aiPrompts", "ai_prompts"))

    @field_validator("max_retries", mode="before")
    @classmethod
    def _default_retries(cls, value):
        return value or DEFAULT_MAX_RETRIES

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def _default_timeout(cls, value):
        return value or DEFAULT_TIMEOUT_MS

    @field_validator("allow_scripted", mode="before")
    @classmethod
    def _default_allow_scripted(cls, value):
        return True if value is None else value

    @field_validator("extract_mode", mode="before")
    @classmethod
    def _default_extract_mode(cls, value):
        return value or "text"

    @field_validator("ai_prompts", mode="before")
    @classmethod
    def _default_ai_prompts(cls, value):
        return value or []


class ScrapeConfig(BaseModel):
    """The optional ``config`` object of a ``POST /scrape`` body (all fields optional)."""

    model_config = ConfigDict(populate_by_name=True)

    selector: Optional[str] = None
    max_retries: Optional[int] = Field(default=None, ge=0, **_alias("maxRetries", "max_retries"))
    timeout_ms: Optional[int] = Field(
        default=None, ge=0, **_alias("timeoutMs", "timeout_ms", "timeout")
    )
    allow_scripted: Optional[bool] = Field(
        default=None, **_alias("allowScripted", "allow_scripted", "javascript")
    )
    extract_mode: Optional[ExtractMode] = Field(default=None, **_alias("extractMode", "extract_mode"))
    ai_prompts: Optional[List[str]] = Field(default=None, **_alias("aiPrompts", "ai_prompts"))


class ScrapeBody(BaseModel):
    url: str = Field(min_length=1, description="Absolute URL of the page to scrape.")
    config: Optional[ScrapeConfig] = None
