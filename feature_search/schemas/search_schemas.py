from enum import Enum
from typing import ClassVar, List, Optional, Union
from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    MOVIE = 'movie'
    SHOW = 'show'


class AppTab(str, Enum):
    MOVIES = 'movies'
    TV_SHOWS = 'tv_shows'


class ViewMode(str, Enum):
    LOADING = 'loading'
    ERROR = 'error'
    NO_RESULTS = 'no_results'
    PROMPT = 'prompt'
    RESULTS = 'results'


class AppRoute(BaseModel):
    name: str
    item_id: Optional[int] = None

    @classmethod
    def movie_detail(cls, movie_id: int) -> "AppRoute":
        return cls(name='movie_detail', item_id=movie_id)

    @classmethod
    def show_detail(cls, show_id: int) -> "AppRoute":
        return cls(name='show_detail', item_id=show_id)


class MediaResult(BaseModel):
    kind: ClassVar[MediaKind]

    id: int
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    is_favorite: bool = False


class MovieResult(MediaResult):
    kind: ClassVar[MediaKind] = MediaKind.MOVIE


class ShowResult(MediaResult):
    kind: ClassVar[MediaKind] = MediaKind.SHOW


SearchItem = Union[MovieResult, ShowResult]


class SearchState(BaseModel):
    query: str = ''
    movies: List[MovieResult] = Field(default_factory=list)
    shows: List[ShowResult] = Field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None

    @property
    def has_results(self) -> bool:
        return bool(self.movies or self.shows)

    @property
    def view_mode(self) -> ViewMode:
        """
        The single mode the search screen should render for this state.
        Loading wins over an error, an error wins over any results.
        """
        if self.loading:
            return ViewMode.LOADING
        if self.error is not None:
            return ViewMode.ERROR
        if not self.has_results and self.query:
            return ViewMode.NO_RESULTS
        if not self.query:
            return ViewMode.PROMPT
        return ViewMode.RESULTS
