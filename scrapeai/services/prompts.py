"""Deterministic text-enhancement prompts.

A prompt is a pure ``str -> str`` function registered under a name in
:data:`PROMPTS`.  :func:`run_pipeline` applies a list of prompt names in
order, each one consuming the previous one's output, so the order of
``aiPrompts`` matters.  Unknown names pass the text through unchanged, which
keeps a request with an unsupported prompt from failing.

Additional prompts can be plugged in with :func:`register_prompt`::

    @register_prompt("uppercase")
    def _uppercase(text: str) -> str:
        return text.upper()
"""

import logging
import re
from typing import Callable, Dict, Iterable

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]

PROMPTS: Dict[str, PromptFn] = {}

SUMMARY_SENTENCES = 3
KEY_POINT_MAX_LEN = 100
KEY_POINT_MARKERS = (":", "。", "•", "-")

_SENTENCE_SPLIT_RE = re.compile(r"[.!?。！？]+")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def register_prompt(name: str) -> Callable[[PromptFn], PromptFn]:
    """Register the decorated function as the prompt called *name*."""

    def decorator(fn: PromptFn) -> PromptFn:
        PROMPTS[name.lower()] = fn
        return fn

    return decorator


def apply_prompt(content: str, prompt: str) -> str:
    """Apply a single prompt; unknown names return *content* unchanged."""
    fn = PROMPTS.get(prompt.lower())
    if fn is None:
        logger.debug("Unknown prompt %r – passing content through", prompt)
        return content
    return fn(content)


def run_pipeline(content: str, prompts: Iterable[str]) -> str:
    """Apply *prompts* sequentially to *content*."""
    for prompt in prompts:
        content = apply_prompt(content, prompt)
    return content


@register_prompt("summarize")
def summarize(text: str) -> str:
    """Keep the first three sentences, re-terminated with periods."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text)]
    sentences = [s for s in sentences if s][:SUMMARY_SENTENCES]
    if not sentences:
        return ""
    return ". ".join(sentences) + "."


@register_prompt("extract_key_points")
def extract_key_points(text: str) -> str:
    """Keep short lines that look like list items or labelled facts."""
    lines = [line for line in text.split("\n") if line.strip()]
    key_lines = [
        line
        for line in lines
        if len(line) < KEY_POINT_MAX_LEN and any(m in line for m in KEY_POINT_MARKERS)
    ]
    return "\n".join(key_lines)


@register_prompt("clean_text")
def clean_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


@register_prompt("extract_numbers")
def extract_numbers(text: str) -> str:
    return ", ".join(_NUMBER_RE.findall(text))


@register_prompt("extract_emails")
def extract_emails(text: str) -> str:
    return ", ".join(_EMAIL_RE.findall(text))
