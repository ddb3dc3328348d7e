"""Errors raised by search collaborators and surfaced by the search controller."""

from typing import Optional

from .schemas.search_schemas import MediaKind


class SearchError(Exception):
    """A use-case failed, e.g. on a transport or parsing problem."""


class SearchFetchError(SearchError):
    """The movie search or the show search failed."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to search: {cause}")


class FavoriteToggleError(SearchError):
    """Changing the favorite flag of a movie or show failed."""

    def __init__(self, kind: MediaKind, item_id: int, cause: Optional[BaseException]):
        self.kind = kind
        self.item_id = item_id
        self.cause = cause
        label = 'movie' if kind == MediaKind.MOVIE else 'TV show'
        super().__init__(f"Failed to toggle {label} favorite: {cause}")
