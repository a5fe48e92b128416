# media_gallery/services/search_service.py
"""
Gallery search.

Stateless filter over a ``GalleryState`` snapshot; it never touches the
stores. The query is lower-cased and split on whitespace, and an entity
matches when every token is a substring of its search index:

- media: id, linked event title, caption and date tokens
- events: title, date tokens and linked media ids

Date tokens cover the forms people type: ``2024-07-04``, ``07/04/2024``,
``7/4/2024`` and ``Jul 4, 2024``.
"""

from typing import Dict, Iterable, List, Optional, Union

from ..enums import LogEmoji, LoggerName, LogSource
from ..models.event_model import Event
from ..models.gallery_model import GalleryState, SearchResult
from ..models.media_model import ImageItem, VideoItem
from ..utils.time_utils import date_search_tokens
from .logger import get_service_logger

logger = get_service_logger(LoggerName.READ_MODEL, LogSource.SYSTEM, LogEmoji.SEARCH)


def tokenize(query: Optional[str]) -> List[str]:
    return (query or "").lower().split()


def _join(parts: Iterable[Optional[str]]) -> str:
    return " ".join(part for part in parts if part).lower()


def media_search_index(
    item: Union[ImageItem, VideoItem], event_titles: Dict[str, str]
) -> str:
    # ``event`` normally holds the title; older documents may hold the id
    linked_title = event_titles.get(item.event, item.event) if item.event else None
    return _join([item.id, item.event, linked_title, item.caption, *date_search_tokens(item.date)])


def event_search_index(event: Event) -> str:
    return _join([event.title, *date_search_tokens(event.date), *event.image_ids])


def _matches(index: str, tokens: List[str]) -> bool:
    return all(token in index for token in tokens)


class SearchService:
    def search(self, state: GalleryState, query: Optional[str]) -> SearchResult:
        tokens = tokenize(query)
        text = (query or "").strip()
        if not tokens:
            return SearchResult(
                query=text, images=state.images, videos=state.videos, events=state.events
            )

        event_titles = {event.id: event.title for event in state.events}
        images = tuple(
            image for image in state.images if _matches(media_search_index(image, event_titles), tokens)
        )
        videos = tuple(
            video for video in state.videos if _matches(media_search_index(video, event_titles), tokens)
        )
        events = tuple(event for event in state.events if _matches(event_search_index(event), tokens))

        result = SearchResult(query=text, images=images, videos=videos, events=events)
        if result.total == 0:
            result = result.model_copy(update={"no_match": True})
        logger.debug(f"Search {text!r}: {result.total} matches")
        return result
