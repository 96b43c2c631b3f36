"""
XML Reader

Read view over one element of an API document. Primitive readers are lenient:
a value that does not parse comes back as None so the caller can leave the
field at its default.
"""

from __future__ import annotations
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional
import xml.etree.ElementTree as ET

from ..runtime.errors import MalformedResponseError

_TRUE = ("true", "1", "yes")
_FALSE = ("false", "0", "no")


class XmlReader:
    """
    Reader over a single element of a parsed document.

    Entities walk ``children()`` once and dispatch on ``name``.
    """

    def __init__(self, element: ET.Element):
        """
        Initialize reader with an element.

        Args:
            element: Element to read from
        """
        self._element = element

    @classmethod
    def parse(cls, buf: bytes) -> "XmlReader":
        """
        Parse a response body and return a reader over its root element.

        Raises:
            MalformedResponseError: If the body is not a well-formed document
        """
        try:
            root = ET.fromstring(buf)
        except ET.ParseError as e:
            raise MalformedResponseError(
                f"Response body is not a valid XML document: {e}",
                details={"body": buf[:200].decode("utf-8", errors="replace")},
                cause=e,
            )
        return cls(root)

    @property
    def element(self) -> ET.Element:
        return self._element

    @property
    def name(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        """Concatenated text content, stripped."""
        return "".join(self._element.itertext()).strip()

    def attribute(self, name: str) -> Optional[str]:
        return self._element.get(name)

    @property
    def href(self) -> Optional[str]:
        return self._element.get("href")

    @property
    def is_nil(self) -> bool:
        """True for ``<tag nil="nil"/>`` elements the API uses for null values."""
        return self._element.get("nil") is not None

    @property
    def has_children(self) -> bool:
        return len(self._element) > 0

    def children(self) -> Iterator["XmlReader"]:
        for child in self._element:
            yield XmlReader(child)

    def child(self, name: str) -> Optional["XmlReader"]:
        found = self._element.find(name)
        return XmlReader(found) if found is not None else None

    # =========================================================================
    # Lenient primitives
    # =========================================================================

    def read_string(self) -> Optional[str]:
        if self.is_nil:
            return None
        return self.text

    def read_int(self) -> Optional[int]:
        text = self.read_string()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None

    def read_decimal(self) -> Optional[Decimal]:
        text = self.read_string()
        if not text:
            return None
        try:
            return Decimal(text)
        except InvalidOperation:
            return None

    def read_bool(self) -> Optional[bool]:
        text = (self.read_string() or "").lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        return None

    def read_datetime(self) -> Optional[datetime]:
        text = self.read_string()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
