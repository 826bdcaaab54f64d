from typing import Any, Mapping, Union

from pydantic import ValidationError

from scrapeai.models.request import ScrapeRequest
from scrapeai.services.errors import ConfigError


def validate_config(config: Union[ScrapeRequest, Mapping[str, Any]]) -> ScrapeRequest:
    """Return a fully-populated :class:`ScrapeRequest` for a partial *config*.

    Missing fields, and falsy ``maxRetries`` / ``timeoutMs`` values, receive
    their defaults.  Keys may be camelCase (``extractMode``) or snake_case
    (``extract_mode``).

    Raises:
        ConfigError: if a supplied field has the wrong type or value.
    """
    if isinstance(config, ScrapeRequest):
        return config
    try:
        return ScrapeRequest.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "request"
        parts.append(f"{loc}: {err['msg']}")
    return "Invalid scrape configuration – " + "; ".join(parts)
