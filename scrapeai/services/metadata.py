from typing import List, Optional

from scrapeai.models.response import Metadata
from scrapeai.services.tokenizer import MarkupScanner

MAX_IMAGES = 10
MAX_LINKS = 20

_METADATA_TAGS = ("title", "meta", "img", "a")


def extract_metadata(html: str) -> Metadata:
    """Collect title, description, image and link URLs from raw *html*.

    One linear scan: the first non-empty ``<title>``, the first
    ``<meta name="description">``, and the ``src`` / ``href`` values of
    ``<img>`` / ``<a>`` elements in document order, capped at
    :data:`MAX_IMAGES` and :data:`MAX_LINKS`.  Attribute values are
    returned entity-decoded by the parser (``&amp;`` becomes ``&``) but
    are not resolved against the page URL.  Fields with no match stay
    ``None``.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    images: List[str] = []
    links: List[str] = []

    for tag in MarkupScanner(html).tags(_METADATA_TAGS):
        if tag.name == "title":
            if title is None:
                title = tag.get_text(strip=True) or None
        elif tag.name == "meta":
            if description is None and str(tag.get("name", "")).strip().lower() == "description":
                description = str(tag.get("content", "")).strip() or None
        elif tag.name == "img":
            src = str(tag.get("src", "")).strip()
            if src and len(images) < MAX_IMAGES:
                images.append(src)
        elif tag.name == "a":
            href = str(tag.get("href", "")).strip()
            if href and len(links) < MAX_LINKS:
                links.append(href)

        if (
            title is not None
            and description is not None
            and len(images) >= MAX_IMAGES
            and len(links) >= MAX_LINKS
        ):
            break

    return Metadata(title=title, description=description, images=images, links=links)
