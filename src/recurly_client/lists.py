"""
Paginated entity lists.

A RecurlyList is a lazily fetched view over a collection endpoint. Nothing is
requested until the contents are first needed; each page URL is then fetched
at most once and its decoded entities are kept in server order.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Generic, Iterator, List, Optional, Set, Type, TypeVar, TYPE_CHECKING

from .api_client import HttpMethod, RecurlyClient, resolve_client
from .codec.reader import XmlReader
from .http import Response

if TYPE_CHECKING:
    from .entity import RecurlyEntity

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="RecurlyEntity")


class ListState(Enum):
    UNFETCHED = "unfetched"
    FETCHED = "fetched"
    REFETCHING = "refetching"


class RecurlyList(Generic[T]):
    """
    Lazily fetched, cached list of entities from one collection endpoint.

    - ``len()`` is the number of entities decoded so far.
    - ``total`` is the server's total record count, or None when unknown.
    - ``exists`` is False when the endpoint answered 404, which is how a
      missing container is told apart from an empty collection.
    - Iterating replays the decoded entities and then follows next-page links,
      fetching each page once. A second iteration makes no requests.

    Instances are not thread-safe: two threads touching an unfetched list at
    the same time may both fetch the first page.
    """

    def __init__(self, entity_cls: Type[T], url: str, client: Optional[RecurlyClient] = None):
        self.entity_cls = entity_cls
        self.url = url
        self._client = client
        self._state = ListState.UNFETCHED
        self._items: List[T] = []
        self._fetched_urls: Set[str] = set()
        self._next_url: Optional[str] = None
        self._total: Optional[int] = None
        self._exists = True
        self._response: Optional[Response] = None

    def __repr__(self) -> str:
        return f"RecurlyList({self.entity_cls.__name__}, {self.url!r}, state={self._state.value})"

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def client(self) -> RecurlyClient:
        return resolve_client(self._client)

    # =========================================================================
    # Fetching
    # =========================================================================

    def _ensure_fetched(self) -> None:
        if self._state is not ListState.FETCHED:
            self._fetch(self.url)
            self._state = ListState.FETCHED

    def _fetch(self, url: str) -> bool:
        """
        Fetch one page and append its entities. Returns False if already fetched.

        A URL only counts as fetched once its request succeeded, so a page
        whose request raised is requested again on the next access.
        """
        if url in self._fetched_urls:
            return False

        page: List[T] = []

        def read_page(reader: XmlReader) -> None:
            for child in reader.children():
                if child.name != self.entity_cls.element_name:
                    continue
                entity = self.entity_cls(client=self._client)
                entity.read_xml(child)
                page.append(entity)

        response = self.client.perform_request(HttpMethod.GET, url, read_xml=read_page)
        self._fetched_urls.add(url)
        self._response = response

        if response.is_not_found:
            if not self._items:
                self._exists = False
            self._next_url = None
            logger.debug(f"List {url} does not exist")
            return True

        self._items.extend(page)
        self._next_url = response.next_url
        if response.record_count is not None or self._total is None:
            self._total = response.record_count
        logger.debug(
            f"Fetched {len(page)} {self.entity_cls.element_name} records from {url} "
            f"(total {self._total}, next {self._next_url})"
        )
        return True

    def fetch_next(self) -> bool:
        """
        Fetch the next page into this list.

        Returns:
            True if a page was fetched, False if there is no further page
        """
        self._ensure_fetched()
        if self._next_url is None:
            return False
        return self._fetch(self._next_url)

    def fetch_all(self) -> List[T]:
        """Follow next-page links until exhausted and return every entity."""
        while self.fetch_next():
            pass
        return list(self._items)

    def refresh(self) -> None:
        """
        Discard cached pages and fetch the first page again.

        The list is REFETCHING until the request completes; if it raises, the
        next access fetches the first page again.
        """
        self._state = ListState.REFETCHING
        self._items = []
        self._fetched_urls = set()
        self._next_url = None
        self._total = None
        self._exists = True
        self._response = None
        self._fetch(self.url)
        self._state = ListState.FETCHED

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def exists(self) -> bool:
        self._ensure_fetched()
        return self._exists

    @property
    def total(self) -> Optional[int]:
        self._ensure_fetched()
        return self._total

    @property
    def has_next(self) -> bool:
        self._ensure_fetched()
        return self._next_url is not None

    @property
    def next_url(self) -> Optional[str]:
        self._ensure_fetched()
        return self._next_url

    @property
    def response(self) -> Optional[Response]:
        """Response of the most recently fetched page."""
        self._ensure_fetched()
        return self._response

    def next_page(self) -> Optional["RecurlyList[T]"]:
        """A separate list over the next page, or None on the last page."""
        url = self.next_url
        if url is None:
            return None
        return RecurlyList(self.entity_cls, url, self._client)

    def __len__(self) -> int:
        self._ensure_fetched()
        return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __getitem__(self, index: int) -> T:
        self._ensure_fetched()
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        self._ensure_fetched()
        position = 0
        while True:
            while position < len(self._items):
                yield self._items[position]
                position += 1
            if not self.fetch_next():
                return
