"""
XML Writer

Streaming-style writer used by entity ``write_xml`` methods. Elements are
opened and closed explicitly; the finished document is rendered by
``to_bytes``.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional
import xml.etree.ElementTree as ET

from ..runtime.errors import EncodingError


def format_value(value: Any) -> str:
    """Render a field value the way the API expects it on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat() + "Z"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


class XmlWriter:
    """Builds one request document."""

    def __init__(self):
        """Initialize writer with no open elements."""
        self._root: Optional[ET.Element] = None
        self._stack: List[ET.Element] = []

    def start_element(self, name: str, **attributes: Any) -> None:
        """Open an element; attributes with a None value are skipped."""
        attrs = {k: format_value(v) for k, v in attributes.items() if v is not None}
        if self._stack:
            element = ET.SubElement(self._stack[-1], name, attrs)
        elif self._root is None:
            element = ET.Element(name, attrs)
            self._root = element
        else:
            raise EncodingError(f"Cannot start <{name}>: document already has a root element")
        self._stack.append(element)

    def end_element(self) -> None:
        if not self._stack:
            raise EncodingError("end_element called with no open element")
        self._stack.pop()

    def element_string(self, name: str, value: Any) -> None:
        """Write ``<name>value</name>`` inside the current element."""
        self.start_element(name)
        if value is not None:
            self._stack[-1].text = format_value(value)
        self.end_element()

    def to_bytes(self) -> bytes:
        """
        Return the finished document.

        Raises:
            EncodingError: If nothing was written or elements are still open
        """
        if self._root is None:
            raise EncodingError("Empty document")
        if self._stack:
            raise EncodingError(f"Unclosed element <{self._stack[-1].tag}>")
        return ET.tostring(self._root, encoding="utf-8", xml_declaration=True)
