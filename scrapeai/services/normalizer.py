"""Plain-text normalisation of fetched markup.

The steps run in a fixed order.  Script and style elements are removed from
the parsed tree before tags are stripped, otherwise their source leaks into
the text.
"""

import re

from bs4 import BeautifulSoup, Comment

# Tags whose entire subtree is non-content
_REMOVE_TAGS = {"script", "style"}

_TAG_RE = re.compile(r"<[^>]+>")
# A tag opener with no closing '>' runs to the end of the text
_UNCLOSED_TAG_RE = re.compile(r"<(?:[^\W\d_]|[!/?])[^>]*$")
_WHITESPACE_RE = re.compile(r"\s+")

_ENTITIES = {
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES))


def strip_non_content(html: str) -> str:
    """Remove ``<script>`` / ``<style>`` elements (with their bodies) and HTML comments.

    The markup is parsed with lxml, so end tags are recognised however the
    page spells them (``</SCRIPT>``, ``</script >``).  The result is the
    re-serialised tree with every attribute dropped.  Entity references come
    back exactly as written; decoding them is a separate step.
    """
    # '&' is escaped before parsing so the parser leaves entity text alone
    soup = BeautifulSoup(html.replace("&", "&amp;"), "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        tag.attrs = {}

    return soup.decode(formatter=None)


def decode_entities(text: str) -> str:
    """Decode the fixed minimal entity set.

    Decoding repeats until no recognised entity is left, so ``&amp;lt;``
    ends up as ``<``.
    """
    while True:
        decoded = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)
        if decoded == text:
            return decoded
        text = decoded


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize(html: str) -> str:
    """Turn raw *html* into clean plain text.

    ``normalize(normalize(x)) == normalize(x)`` for any input: the output
    holds no tags, comments, recognised entities, or whitespace runs.
    """
    text = strip_non_content(html)
    text = decode_entities(text)
    text = _TAG_RE.sub(" ", text)
    text = _UNCLOSED_TAG_RE.sub(" ", text)
    return collapse_whitespace(text)
