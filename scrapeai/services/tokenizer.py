"""Tolerant, single-pass markup tokenizer.

:class:`MarkupScanner` parses a document once with the forgiving ``lxml``
parser and then hands out its nodes strictly in document order, either one
at a time (:meth:`MarkupScanner.next_tag`, :meth:`MarkupScanner.next_text`)
or as an iterator over tags.  Broken or unclosed markup never raises; lxml
repairs it the way a browser would.

Extractors built on top of the scanner never rewind, so every field they
collect comes from one linear pass over the document.
"""

from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup, NavigableString, Tag


class MarkupScanner:
    def __init__(self, html: str) -> None:
        self._soup = BeautifulSoup(html or "", "lxml")
        self._nodes = self._soup.descendants

    def next_tag(self, names: Optional[Iterable[str]] = None) -> Optional[Tag]:
        """Advance to the next element (optionally one of *names*) and return it.

        Returns None once the document is exhausted.
        """
        wanted = {n.lower() for n in names} if names is not None else None
        for node in self._nodes:
            if isinstance(node, Tag) and (wanted is None or node.name in wanted):
                return node
        return None

    def next_text(self) -> Optional[str]:
        """Advance to the next run of character data and return it.

        Comments, doctypes, CDATA and processing instructions are skipped.
        Returns None once the document is exhausted.
        """
        for node in self._nodes:
            if type(node) is NavigableString:
                return str(node)
        return None

    def tags(self, names: Optional[Iterable[str]] = None) -> Iterator[Tag]:
        """Yield the remaining elements (optionally only *names*) in document order."""
        wanted = list(names) if names is not None else None
        while True:
            tag = self.next_tag(wanted)
            if tag is None:
                return
            yield tag


def has_ancestor(tag: Tag, names: Iterable[str]) -> bool:
    """Return True when *tag* is nested inside any element named in *names*."""
    return tag.find_parent(list(names)) is not None
