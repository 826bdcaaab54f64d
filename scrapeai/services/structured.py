import json
import logging
from typing import Any

from bs4 import Tag

from scrapeai.models.response import StructuredData
from scrapeai.services.errors import ParseError
from scrapeai.services.tokenizer import MarkupScanner, has_ancestor

logger = logging.getLogger(__name__)

_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_LISTS = ("ul", "ol")
_JSON_LD_TYPE = "application/ld+json"

_STRUCTURED_TAGS = _HEADINGS + _LISTS + ("table", "form", "script")


def _inner_markup(tag: Tag) -> str:
    return tag.decode_contents().strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_json_ld(body: str) -> Any:
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ParseError(f"Malformed JSON-LD block: {exc}") from exc


def extract_structured_data(html: str) -> StructuredData:
    """Extract headings, list/table/form blocks and JSON-LD from *html*.

    Lists, tables and forms are reported once per outermost block; a list
    nested inside another list is part of its parent's inner markup.  A
    JSON-LD block that does not parse is skipped.
    """
    data = StructuredData()

    for tag in MarkupScanner(html).tags(_STRUCTURED_TAGS):
        name = tag.name
        if name in _HEADINGS:
            text = tag.get_text(" ", strip=True)
            if text:
                data.headings.append(text)
        elif name in _LISTS:
            if not has_ancestor(tag, _LISTS):
                data.lists.append(_inner_markup(tag))
        elif name == "table":
            if not has_ancestor(tag, ("table",)):
                data.tables.append(_inner_markup(tag))
        elif name == "form":
            if not has_ancestor(tag, ("form",)):
                data.forms.append(_inner_markup(tag))
        elif name == "script":
            if str(tag.get("type", "")).strip().lower() != _JSON_LD_TYPE:
                continue
            try:
                data.json_ld.append(_parse_json_ld((tag.string or "").strip()))
            except ParseError as exc:
                logger.debug("Skipping JSON-LD block: %s", exc)

    return data
