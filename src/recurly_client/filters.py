"""
Filter criteria for list endpoints.

Provides the typed query parameters the API accepts for server-side filtering,
sorting and pagination of collections.
"""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator, model_validator

from .codec.writer import format_value
from .runtime.url import ResourcePath


class FilterKey(str, Enum):
    """Query parameters recognized by list endpoints."""

    STATE = "state"
    TYPE = "type"
    CURSOR = "cursor"
    SORT = "sort"
    ORDER = "order"
    PER_PAGE = "per_page"
    BEGIN_TIME = "begin_time"
    END_TIME = "end_time"


class SortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterCriteria(BaseModel):
    """
    Server-side filtering, sorting and paging options.

    Keys can be given to the constructor, assigned as attributes or set through
    the chainable ``set``. Only keys that were set appear in the query, in the
    order they were first set; setting a key again overwrites its value in
    place and setting it to None removes it.

    Example:
        ```python
        criteria = FilterCriteria(state="active").set(FilterKey.PER_PAGE, 50)
        criteria.to_query()  # 'state=active&per_page=50'
        ```
    """
    state: Optional[str] = Field(default=None, description="Resource state to filter by")
    type: Optional[str] = Field(default=None, description="Resource type to filter by")
    cursor: Optional[str] = Field(default=None, description="Opaque page cursor")
    sort: Optional[SortField] = Field(default=None, description="Field to sort by")
    order: Optional[SortOrder] = Field(default=None, description="Sort direction")
    per_page: Optional[int] = Field(default=None, ge=1, le=200, description="Records per page")
    begin_time: Optional[datetime] = Field(default=None, description="Lower bound on the sort field")
    end_time: Optional[datetime] = Field(default=None, description="Upper bound on the sort field")

    model_config = {"validate_assignment": True}

    _order: List[str] = PrivateAttr(default_factory=list)

    def __init__(self, **data: Any):
        super().__init__(**data)
        self._order = [
            name for name in data
            if name in type(self).model_fields and getattr(self, name) is not None
        ]

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in type(self).model_fields:
            super().__setattr__(name, value)
            return
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            # Model validators run after the field is written; put it back
            self.__dict__[name] = previous
            raise
        self._track(name)

    def _track(self, name: str) -> None:
        if getattr(self, name) is None:
            if name in self._order:
                self._order.remove(name)
        elif name not in self._order:
            self._order.append(name)

    @field_validator("state", "type", mode="before")
    @classmethod
    def _enum_to_value(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("begin_time", "end_time")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def _check_time_range(self) -> "FilterCriteria":
        if self.begin_time and self.end_time and self.end_time < self.begin_time:
            raise ValueError("end_time must not be earlier than begin_time")
        return self

    def set(self, key: Union[FilterKey, str], value: Any) -> "FilterCriteria":
        """
        Set one parameter and return self for chaining.

        Raises:
            ValueError: If the key is not a recognized filter key
        """
        try:
            name = FilterKey(key).value
        except ValueError:
            raise ValueError(f"Unknown filter key: {key!r}")
        setattr(self, name, value)
        return self

    @property
    def keys(self) -> List[str]:
        """Names of the keys that are set, in query order."""
        return list(self._order)

    def to_params(self) -> Dict[str, str]:
        """Convert to an ordered mapping of query parameters."""
        result: Dict[str, str] = {}
        for name in self._order:
            value = getattr(self, name)
            if value is not None:
                result[name] = format_value(value)
        return result

    def to_query(self) -> str:
        """Percent-escaped query string; empty when nothing is set."""
        return urlencode(list(self.to_params().items()))

    @classmethod
    def from_query(cls, query: str) -> "FilterCriteria":
        """Parse a query string produced by ``to_query``; unrecognized keys are ignored."""
        known = {k.value for k in FilterKey}
        data = {k: v for k, v in parse_qsl(query.lstrip("?")) if k in known}
        return cls(**data)


def build_path(base: Union[ResourcePath, str], criteria: Optional[FilterCriteria] = None,
               **extra: Any) -> str:
    """
    Render a list path with filter criteria followed by endpoint-specific parameters.

    Extra parameters with a None value are skipped.
    """
    params: Dict[str, Any] = criteria.to_params() if criteria is not None else {}
    for name, value in extra.items():
        if value is not None:
            params[name] = format_value(value)
    if not isinstance(base, ResourcePath):
        base = ResourcePath(base)
    return base.with_query(params)
