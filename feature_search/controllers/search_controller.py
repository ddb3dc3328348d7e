import asyncio
import logging
from typing import Callable, Optional, Sequence
from ..clients.use_cases import (
    GetMovieDetailUseCase,
    GetShowDetailUseCase,
    Navigator,
    SearchMoviesUseCase,
    SearchShowsUseCase,
    ToggleFavoriteUseCase,
)
from ..config import settings
from ..errors import FavoriteToggleError, SearchError, SearchFetchError
from ..schemas.search_schemas import (
    AppRoute,
    AppTab,
    MediaKind,
    MediaResult,
    MovieResult,
    SearchItem,
    SearchState,
    ShowResult,
)
from ..utils.debounce import Debouncer

logger = logging.getLogger(__name__)


class SearchController:
    """
    Drives the movie and TV show search screen.

    Query changes are debounced, then both searches run concurrently as one
    cancelable task. Only the most recently started search may commit its
    results: older ones are cancelled and their generation no longer matches.
    Favorite toggles update local state only after the use-case confirms.

    :param search_movies: Movie search use-case.
    :param search_shows: TV show search use-case.
    :param get_movie_detail: Movie detail use-case, kept for the detail screens.
    :param get_show_detail: TV show detail use-case, kept for the detail screens.
    :param toggle_favorite: Favorite toggle use-case.
    :param navigator: App navigator.
    :param on_state_update: Called with the state after every mutation.
    :param debounce_ms: Quiet period before a query change is searched.
    """

    def __init__(
        self,
        search_movies: SearchMoviesUseCase,
        search_shows: SearchShowsUseCase,
        get_movie_detail: GetMovieDetailUseCase,
        get_show_detail: GetShowDetailUseCase,
        toggle_favorite: ToggleFavoriteUseCase,
        navigator: Navigator,
        on_state_update: Optional[Callable[[SearchState], None]] = None,
        debounce_ms: Optional[int] = None,
    ):
        self._search_movies = search_movies
        self._search_shows = search_shows
        self._get_movie_detail = get_movie_detail
        self._get_show_detail = get_show_detail
        self._toggle_favorite = toggle_favorite
        self._navigator = navigator
        self.on_state_update = on_state_update

        if debounce_ms is None:
            debounce_ms = settings.SEARCH_DEBOUNCE_MS
        self._debouncer = Debouncer(debounce_ms / 1000, self.perform_search)

        self._state = SearchState()
        self._search_task: Optional[asyncio.Task] = None
        self._generation = 0
        self.last_error: Optional[SearchError] = None
        self._closed = False

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def query(self) -> str:
        """
        Text in the search box. Assigning it schedules a debounced search,
        so assignment needs a running event loop (`RuntimeError` otherwise).
        Assignments after `close()` are ignored.
        """
        return self._state.query

    @query.setter
    def query(self, value: str) -> None:
        if self._closed:
            return
        self._state.query = value
        self._notify_update()
        self._debouncer.submit(value)

    def _notify_update(self) -> None:
        if self.on_state_update:
            self.on_state_update(self._state)

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _cancel_search(self) -> None:
        """Supersede the in-flight search, if any."""
        self._generation += 1
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = None

    async def perform_search(self, query: str) -> None:
        """
        Search movies and TV shows for `query`, bypassing the debounce.

        An empty query clears the results without calling any use-case.
        Returns once this search has committed or has been superseded.

        :param query: Exact query text; it is not trimmed.
        """
        if self._closed:
            return
        self._cancel_search()
        generation = self._generation

        self._state.loading = True
        self._state.error = None
        self._notify_update()

        if not query:
            self._state.movies = []
            self._state.shows = []
            self._state.loading = False
            self._notify_update()
            return

        logger.debug(f"Searching movies and TV shows for {query!r}")
        task = asyncio.create_task(self._run_search(query, generation))
        self._search_task = task
        await asyncio.wait({task})

    async def _run_search(self, query: str, generation: int) -> None:
        page = settings.SEARCH_FIRST_PAGE
        movies_task = asyncio.ensure_future(self._search_movies.execute(query, page))
        shows_task = asyncio.ensure_future(self._search_shows.execute(query, page))
        fetches = [movies_task, shows_task]
        try:
            await asyncio.wait(fetches, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            # Either fetch failing, or this search being cancelled, stops both.
            for fetch in fetches:
                if not fetch.done():
                    fetch.cancel()

        failures = [
            fetch.exception() for fetch in fetches
            if fetch.done() and not fetch.cancelled() and fetch.exception() is not None
        ]
        if failures:
            if not self._is_current(generation):
                return
            e = failures[0]
            error = SearchFetchError(e)
            logger.error(f"Error searching for {query!r}: {e!r}")
            self.last_error = error
            self._state.error = str(error)
            self._state.loading = False
            self._notify_update()
            return

        if not self._is_current(generation):
            return
        movies, shows = movies_task.result(), shows_task.result()
        self._state.movies = list(movies)
        self._state.shows = list(shows)
        self._state.loading = False
        self._notify_update()
        logger.debug(
            f"Search for {query!r} found {len(movies)} movies and {len(shows)} TV shows")

    async def retry(self) -> None:
        """Search the current query again, e.g. from the error view."""
        await self.perform_search(self._state.query)

    async def toggle_favorite(self, item: SearchItem) -> None:
        """
        Toggle the favorite flag of a movie or a TV show.

        :param item: Result row the user acted on.
        """
        if item.kind == MediaKind.MOVIE:
            await self.toggle_movie_favorite(item)
        else:
            await self.toggle_show_favorite(item)

    async def toggle_movie_favorite(self, movie: MovieResult) -> None:
        """
        Persist the inverse of `movie.is_favorite`, then update the matching
        row of the current movie list. A failure sets the error instead.

        :param movie: Movie whose flag should be inverted.
        """
        target = not movie.is_favorite
        try:
            await self._toggle_favorite.toggle_movie(movie.id, target)
        except Exception as e:
            self._fail_toggle(FavoriteToggleError(MediaKind.MOVIE, movie.id, e))
            return
        self._apply_favorite(self._state.movies, movie.id, target)

    async def toggle_show_favorite(self, show: ShowResult) -> None:
        """
        Persist the inverse of `show.is_favorite`, then update the matching
        row of the current TV show list. A failure sets the error instead.

        :param show: TV show whose flag should be inverted.
        """
        target = not show.is_favorite
        try:
            await self._toggle_favorite.toggle_show(show.id, target)
        except Exception as e:
            self._fail_toggle(FavoriteToggleError(MediaKind.SHOW, show.id, e))
            return
        self._apply_favorite(self._state.shows, show.id, target)

    def _apply_favorite(self, items: Sequence[MediaResult], item_id: int, is_favorite: bool) -> None:
        if self._closed:
            return
        entry = next((i for i in items if i.id == item_id), None)
        if entry is None:
            return
        entry.is_favorite = is_favorite
        self._notify_update()

    def _fail_toggle(self, error: FavoriteToggleError) -> None:
        if self._closed:
            return
        logger.error(f"Error toggling {error.kind.value} {error.item_id} favorite: {error.cause!r}")
        if self._state.loading:
            # An error cannot be shown while loading; drop the search.
            self._cancel_search()
            self._state.loading = False
        self.last_error = error
        self._state.error = str(error)
        self._notify_update()

    def navigate_to_detail(self, kind: MediaKind, item_id: int) -> None:
        """
        Leave the search screen, then open the detail screen in the item's tab.

        :param kind: Whether `item_id` is a movie or a TV show id.
        :param item_id: Id of the movie or TV show.
        """
        if kind == MediaKind.MOVIE:
            route, tab = AppRoute.movie_detail(item_id), AppTab.MOVIES
        else:
            route, tab = AppRoute.show_detail(item_id), AppTab.TV_SHOWS
        self._navigator.dismiss()
        self._navigator.navigate(route, tab)

    def navigate_to_movie_detail(self, movie_id: int) -> None:
        """:param movie_id: Movie to open in the movies tab."""
        self.navigate_to_detail(MediaKind.MOVIE, movie_id)

    def navigate_to_show_detail(self, show_id: int) -> None:
        """:param show_id: TV show to open in the TV shows tab."""
        self.navigate_to_detail(MediaKind.SHOW, show_id)

    def dismiss(self) -> None:
        """Close the search screen without navigating anywhere else."""
        self._navigator.dismiss()

    def show_sheet(self, route: AppRoute) -> None:
        """
        Present `route` as a sheet over the search screen.

        :param route: Route to present.
        """
        self._navigator.present_sheet(route)

    def close(self) -> None:
        """Stop pending and in-flight work; the state is not mutated afterwards."""
        self._closed = True
        self._debouncer.close()
        self._cancel_search()
