from typing import Any, List, Protocol
from ..schemas.search_schemas import AppRoute, AppTab, MovieResult, ShowResult


class SearchMoviesUseCase(Protocol):
    async def execute(self, query: str, page: int) -> List[MovieResult]:
        """
        Search movies matching the query.

        :param query: Text typed by the user, passed through untouched.
        :param page: Result page to fetch, starting at 1.
        :return: Movies in relevance order.
        :raises SearchError: On transport or parsing failure.
        """
        ...


class SearchShowsUseCase(Protocol):
    async def execute(self, query: str, page: int) -> List[ShowResult]:
        """
        Search TV shows matching the query.

        :param query: Text typed by the user, passed through untouched.
        :param page: Result page to fetch, starting at 1.
        :return: TV shows in relevance order.
        :raises SearchError: On transport or parsing failure.
        """
        ...


class GetMovieDetailUseCase(Protocol):
    async def execute(self, movie_id: int) -> Any: ...


class GetShowDetailUseCase(Protocol):
    async def execute(self, show_id: int) -> Any: ...


class ToggleFavoriteUseCase(Protocol):
    """
    Persist the favorite flag of a movie or a TV show.
    Movies and shows have separate id spaces, so each has its own call.
    Setting the same flag twice leaves the same end state.
    """

    async def toggle_movie(self, movie_id: int, is_favorite: bool) -> None: ...

    async def toggle_show(self, show_id: int, is_favorite: bool) -> None: ...


class Navigator(Protocol):
    def dismiss(self) -> None: ...

    def navigate(self, route: AppRoute, tab: AppTab) -> None: ...

    def present_sheet(self, route: AppRoute) -> None: ...
