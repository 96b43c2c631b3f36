"""
Recurly Document Codec Module

Reads and writes the XML documents exchanged with the API.

Key components:
- reader.py: Lenient read view over a parsed element
- writer.py: Element-by-element document writer
- fields.py: Declarative tag <-> attribute field table used by entities
"""

from .reader import XmlReader
from .writer import XmlWriter, format_value
from .fields import (
    Field,
    TextField,
    IntField,
    DecimalField,
    BoolField,
    DateTimeField,
    EnumField,
    FlagsField,
    EmbeddedField,
    LinkField,
    parse_enum,
    parse_flags,
)

__all__ = [
    "XmlReader",
    "XmlWriter",
    "format_value",
    "Field",
    "TextField",
    "IntField",
    "DecimalField",
    "BoolField",
    "DateTimeField",
    "EnumField",
    "FlagsField",
    "EmbeddedField",
    "LinkField",
    "parse_enum",
    "parse_flags",
]
