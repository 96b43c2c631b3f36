"""
Declarative field mapping between document elements and entity attributes.

Each entity class lists its fields once; ``RecurlyEntity.read_xml`` looks the
element name up in that table and ``write_xml`` walks it in order. Tags that
are not in the table are ignored on read.
"""

from __future__ import annotations
from enum import Enum, Flag
import re
from typing import Any, Callable, Optional, Type, Union, TYPE_CHECKING

from .reader import XmlReader
from .writer import XmlWriter, format_value
from ..runtime.url import identifier_from_href

if TYPE_CHECKING:
    from ..entity import RecurlyEntity


_FLAG_SEPARATORS = re.compile(r"[\s,|]+")


class Field:
    """
    Base field: a text element mapped to an attribute.

    Args:
        tag: Element name on the wire
        attr: Attribute name on the entity (defaults to ``tag``)
        writable: Include the field in request documents
        required: Emit the element even when the value is empty
    """

    def __init__(self, tag: str, attr: Optional[str] = None, *,
                 writable: bool = True, required: bool = False):
        self.tag = tag
        self.attr = attr or tag
        self.writable = writable
        self.required = required

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tag!r})"

    def parse(self, reader: XmlReader) -> Any:
        return reader.read_string()

    def serialize(self, value: Any) -> str:
        return format_value(value)

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def read(self, entity: "RecurlyEntity", reader: XmlReader) -> None:
        """Assign the parsed value; unparseable or nil values leave the default."""
        if reader.is_nil:
            return
        value = self.parse(reader)
        if value is not None:
            setattr(entity, self.attr, value)

    def write(self, entity: "RecurlyEntity", writer: XmlWriter) -> None:
        if not self.writable:
            return
        value = getattr(entity, self.attr, None)
        if self.is_empty(value):
            if self.required:
                writer.element_string(self.tag, None)
            return
        writer.element_string(self.tag, self.serialize(value))


class TextField(Field):
    """Plain string element."""


class IntField(Field):

    def parse(self, reader: XmlReader) -> Optional[int]:
        return reader.read_int()


class DecimalField(Field):

    def parse(self, reader: XmlReader) -> Any:
        return reader.read_decimal()


class BoolField(Field):

    def parse(self, reader: XmlReader) -> Optional[bool]:
        return reader.read_bool()


class DateTimeField(Field):

    def parse(self, reader: XmlReader) -> Any:
        return reader.read_datetime()


class EnumField(Field):
    """Element holding one value of a closed vocabulary, matched case-insensitively."""

    def __init__(self, tag: str, enum_cls: Type[Enum], attr: Optional[str] = None, **kwargs: Any):
        super().__init__(tag, attr, **kwargs)
        self.enum_cls = enum_cls

    def parse(self, reader: XmlReader) -> Optional[Enum]:
        return parse_enum(self.enum_cls, reader.read_string())


class FlagsField(Field):
    """
    Element holding a set of flags.

    The wire value may carry several tokens separated by whitespace, commas or
    pipes (``active past_due``); each token is mapped and the results combined.
    """

    def __init__(self, tag: str, flag_cls: Type[Flag], attr: Optional[str] = None, **kwargs: Any):
        super().__init__(tag, attr, **kwargs)
        self.flag_cls = flag_cls

    def parse(self, reader: XmlReader) -> Optional[Flag]:
        return parse_flags(self.flag_cls, reader.read_string())

    def serialize(self, value: Any) -> str:
        names = [m.name.lower() for m in self.flag_cls if m.value and m in value]
        return " ".join(names)

    def is_empty(self, value: Any) -> bool:
        return value is None or not value


class EmbeddedField(Field):
    """A nested entity document, e.g. ``<delivery>`` inside ``<gift_card>``."""

    def __init__(self, tag: str, target: Union[str, type], attr: Optional[str] = None, **kwargs: Any):
        super().__init__(tag, attr, **kwargs)
        self.target = target

    def target_cls(self) -> type:
        return resolve_entity_class(self.target)

    def parse(self, reader: XmlReader) -> Any:
        entity = self.target_cls()()
        entity.read_xml(reader)
        return entity

    def write(self, entity: "RecurlyEntity", writer: XmlWriter) -> None:
        if not self.writable:
            return
        value = getattr(entity, self.attr, None)
        if value is None:
            return
        value.write_xml(writer, element_name=self.tag)


class LinkField(EmbeddedField):
    """
    Reference to a related entity.

    On read the element either carries an ``href`` (stored as an unresolved
    identifier) or an embedded document (stored as the decoded entity). The
    entity attribute must be a ``linked`` descriptor. On write a resolved
    entity is embedded; an identifier alone is written as the target's key
    element.
    """

    def read(self, entity: "RecurlyEntity", reader: XmlReader) -> None:
        from ..entity import Link

        if reader.is_nil:
            return
        href = reader.href
        if href is not None:
            identifier = identifier_from_href(href)
            if identifier is not None:
                setattr(entity, self.attr, Link(identifier=identifier))
        elif reader.has_children:
            setattr(entity, self.attr, Link(entity=self.parse(reader)))

    def write(self, entity: "RecurlyEntity", writer: XmlWriter) -> None:
        if not self.writable:
            return
        link = entity.get_link(self.attr)
        if link is None:
            return
        if link.entity is not None:
            link.entity.write_xml(writer, element_name=self.tag)
        elif link.identifier is not None:
            writer.start_element(self.tag)
            writer.element_string(self.target_cls().key_tag, link.identifier)
            writer.end_element()


# =============================================================================
# Helpers
# =============================================================================

def _normalize(token: str) -> str:
    return token.strip().lower().replace("-", "_")


def parse_enum(enum_cls: Type[Enum], text: Optional[str]) -> Optional[Enum]:
    """Match text against enum values, then names, ignoring case."""
    if not text:
        return None
    wanted = _normalize(text)
    for member in enum_cls:
        if _normalize(str(member.value)) == wanted or member.name.lower() == wanted:
            return member
    return None


def parse_flags(flag_cls: Type[Flag], text: Optional[str]) -> Optional[Flag]:
    """Tokenize and combine flag names; unknown tokens are ignored."""
    if not text:
        return None
    result = None
    for token in _FLAG_SEPARATORS.split(text):
        if not token:
            continue
        member = parse_enum(flag_cls, token)
        if member is None:
            continue
        result = member if result is None else result | member
    return result


def resolve_entity_class(target: Union[str, type, Callable[[], type]]) -> type:
    """Resolve a field target given as a class, an element name or a factory."""
    if isinstance(target, type):
        return target
    if isinstance(target, str):
        from ..entity import ENTITY_REGISTRY

        try:
            return ENTITY_REGISTRY[target]
        except KeyError:
            raise LookupError(f"No entity registered for element <{target}>")
    return target()
