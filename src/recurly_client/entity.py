"""
Base class for API entities.

An entity declares its wire element, its field table and its key attribute.
Reading, writing, equality and the standard fetch/list helpers are shared.
"""

from __future__ import annotations
from typing import Any, Callable, ClassVar, Dict, Generic, Optional, Tuple, Type, TypeVar

from .api_client import HttpMethod, RecurlyClient, resolve_client
from .codec.fields import Field
from .codec.reader import XmlReader
from .codec.writer import XmlWriter
from .http import Response
from .lists import RecurlyList

E = TypeVar("E", bound="RecurlyEntity")

# element name -> entity class, filled in as entity classes are defined
ENTITY_REGISTRY: Dict[str, Type["RecurlyEntity"]] = {}


class Link(Generic[E]):
    """
    A reference to a related entity.

    Holds either an unresolved identifier (taken from an ``href``) or the
    entity itself. ``resolve`` fetches an unresolved identifier once and keeps
    the result, including a None result for a missing resource.
    """

    __slots__ = ("identifier", "entity", "_resolved")

    def __init__(self, identifier: Optional[str] = None, entity: Optional[E] = None):
        self.identifier = identifier
        self.entity = entity
        self._resolved = entity is not None

    def __repr__(self) -> str:
        if self._resolved:
            return f"Link(entity={self.entity!r})"
        return f"Link(identifier={self.identifier!r})"

    @property
    def resolved(self) -> bool:
        return self._resolved

    def resolve(self, fetch: Callable[[str, Optional[RecurlyClient]], Optional[E]],
                client: Optional[RecurlyClient] = None) -> Optional[E]:
        if not self._resolved:
            if self.identifier is None:
                return None
            self.entity = fetch(self.identifier, client)
            self._resolved = True
        return self.entity


class linked:
    """
    Descriptor for an attribute backed by a Link.

    Reading the attribute resolves the link with ``fetch(identifier, client)``
    on first access and returns the cached entity afterwards. Assigning an
    entity stores it as resolved; assigning a Link stores it as-is.

    The first resolution is not synchronized. Two threads reading the same
    unresolved attribute may both fetch; both fetches are plain reads and the
    last result wins.
    """

    def __init__(self, fetch: Callable[[str, Optional[RecurlyClient]], Any]):
        self.fetch = fetch
        self.name = ""
        self.slot = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.slot = "_link_" + name

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Any:
        if obj is None:
            return self
        link = obj.__dict__.get(self.slot)
        if link is None:
            return None
        return link.resolve(self.fetch, obj._client)

    def __set__(self, obj: Any, value: Any) -> None:
        if value is None or isinstance(value, Link):
            obj.__dict__[self.slot] = value
        else:
            obj.__dict__[self.slot] = Link(entity=value)


class RecurlyEntity:
    """
    Domain object backed by an API resource.

    Subclasses set ``element_name``, ``fields`` and ``key_attr``. Equality and
    hashing use the key only.
    """

    element_name: ClassVar[str] = ""
    fields: ClassVar[Tuple[Field, ...]] = ()
    key_attr: ClassVar[str] = ""
    key_tag: ClassVar[str] = ""
    _field_table: ClassVar[Dict[str, Field]] = {}

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls._field_table = {f.tag: f for f in cls.fields}
        key_tag = cls.key_attr
        for f in cls.fields:
            if f.attr == cls.key_attr:
                key_tag = f.tag
                break
        cls.key_tag = key_tag
        if cls.element_name:
            ENTITY_REGISTRY[cls.element_name] = cls

    def __init__(self, client: Optional[RecurlyClient] = None, **values: Any):
        self._client = client
        for f in self.fields:
            setattr(self, f.attr, None)
        for name, value in values.items():
            if not any(f.attr == name for f in self.fields):
                raise TypeError(f"{type(self).__name__} has no field {name!r}")
            setattr(self, name, value)

    @property
    def client(self) -> RecurlyClient:
        return resolve_client(self._client)

    def get_link(self, attr: str) -> Optional[Link]:
        """The raw Link behind a linked attribute, without resolving it."""
        return self.__dict__.get("_link_" + attr)

    # =========================================================================
    # Document codec
    # =========================================================================

    def read_xml(self, reader: XmlReader) -> None:
        """Populate fields from this entity's element; unknown tags are skipped."""
        for child in reader.children():
            field = self._field_table.get(child.name)
            if field is not None:
                field.read(self, child)

    def write_xml(self, writer: XmlWriter, element_name: Optional[str] = None) -> None:
        """Write this entity as one element, omitting empty fields."""
        writer.start_element(element_name or self.element_name)
        for field in self.fields:
            field.write(self, writer)
        writer.end_element()

    def to_xml(self) -> bytes:
        writer = XmlWriter()
        self.write_xml(writer)
        return writer.to_bytes()

    @classmethod
    def from_xml(cls: Type[E], buf: bytes, client: Optional[RecurlyClient] = None) -> E:
        entity = cls(client=client)
        entity.read_xml(XmlReader.parse(buf))
        return entity

    # =========================================================================
    # Request helpers
    # =========================================================================

    @classmethod
    def _fetch(cls: Type[E], path: str, client: Optional[RecurlyClient] = None) -> Optional[E]:
        """GET one resource; None when it does not exist."""
        entity = cls(client=client)
        response = entity.client.perform_request(HttpMethod.GET, path, read_xml=entity.read_xml)
        return None if response.is_not_found else entity

    @classmethod
    def _list(cls: Type[E], path: str, client: Optional[RecurlyClient] = None) -> RecurlyList[E]:
        return RecurlyList(cls, path, client)

    def _perform(self, method: HttpMethod, path: str, write: bool = False,
                 read: bool = True) -> Response:
        """Send this entity (optionally) and read the response into it; 404 raises."""
        return self.client.perform_request(
            method,
            path,
            write_xml=self.write_xml if write else None,
            read_xml=self.read_xml if read else None,
            allow_not_found=False,
        )

    # =========================================================================
    # Object overrides
    # =========================================================================

    @property
    def key(self) -> Any:
        return getattr(self, self.key_attr, None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecurlyEntity) or type(other) is not type(self):
            return NotImplemented
        if self.key is None or other.key is None:
            return self is other
        return self.key == other.key

    def __hash__(self) -> int:
        if self.key is None:
            return id(self)
        return hash((type(self).__name__, self.key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key_attr}={self.key!r})"

    def __str__(self) -> str:
        return f"Recurly {type(self).__name__}: {self.key}"
