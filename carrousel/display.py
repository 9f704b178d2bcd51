"""
Carousel display driver.

Owns the current Playlist and decides *when* to advance it: each item stays
on screen for its declared duration, the successor is chosen and preloaded,
and the screen swaps once the successor is ready. Every few hours the catalog
is reloaded and the rotation starts over from a fresh Playlist.
"""

import asyncio
import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, Sequence, Union

from carrousel.content import Content
from carrousel.errors import CarrouselError, ConfigurationError
from carrousel.scheduling import Playlist, SelectionStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Displaying:
    """One item on screen, waiting for its duration to pass."""

    playlist: Playlist
    current_content: Content


@dataclass(frozen=True)
class LoadingNext:
    """Successor chosen and loading while the current item stays on screen."""

    playlist: Playlist
    current_content: Content
    next_content: Content


CarouselState = Union[Displaying, LoadingNext]


class Presenter(ABC):
    """Renders content chosen by the carousel."""

    @abstractmethod
    async def show(self, content: Content) -> None:
        """Put ``content`` on screen."""
        pass

    @abstractmethod
    async def preload(self, content: Content) -> None:
        """Return once ``content`` is ready to be shown."""
        pass


class LoggingPresenter(Presenter):
    """Headless presenter that only logs what would be on screen."""

    async def show(self, content: Content) -> None:
        logger.info(
            f"Showing {content.type.value} {content.url} for {content.duration:g}s"
        )

    async def preload(self, content: Content) -> None:
        logger.debug(f"Preloading {content.type.value} {content.url}")


def next_refresh_time(current_time: datetime, refresh_interval: timedelta) -> datetime:
    """
    Next wall-clock multiple of ``refresh_interval`` since the epoch.

    Aligning to the epoch makes every screen refresh at the same moments
    regardless of when it was started.
    """
    increment = refresh_interval.total_seconds()
    next_timestamp = (math.floor(current_time.timestamp() / increment) + 1) * increment
    return datetime.fromtimestamp(next_timestamp, tz=current_time.tzinfo)


class Carousel:
    """
    Timer driven rotation of a content catalog.

    Features:
    - Advances the playlist after each item's duration
    - Preloads the successor before swapping, with a timeout
    - Periodic catalog reload aligned to wall-clock boundaries
    - Selection statistics

    Usage:
        carousel = Carousel(lambda: load_catalog(), LoggingPresenter())
        await carousel.start()
        ...
        await carousel.stop()
    """

    def __init__(
        self,
        catalog_loader: Callable[[], Sequence[Content]],
        presenter: Presenter,
        refresh_interval: timedelta = timedelta(hours=4),
        preload_timeout: float = 30.0,
        clock: Callable[[], datetime] = datetime.now,
        draw: Callable[[], float] = random.random,
        strict: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        retry_delay: float = 5.0,
    ):
        self._catalog_loader = catalog_loader
        self._presenter = presenter
        self._refresh_interval = refresh_interval
        self._preload_timeout = preload_timeout
        self._clock = clock
        self._draw = draw
        self._strict = strict
        self._sleep = sleep
        self._retry_delay = retry_delay

        self.state: Optional[CarouselState] = None
        self.stats = SelectionStats()
        self._next_refresh: Optional[datetime] = None
        self._running = False
        self._loop_task: Optional[asyncio.Task] = None
        self.last_error: Optional[BaseException] = None
        # Only one advance may be in flight against the current playlist
        self._lock = asyncio.Lock()

    @property
    def next_refresh(self) -> Optional[datetime]:
        """When the catalog will next be reloaded."""
        return self._next_refresh

    def _rebuild(self, current_time: datetime) -> Playlist:
        """Load the catalog and build a fresh playlist."""
        catalog = self._catalog_loader()
        playlist = Playlist.initial(catalog, current_time)
        self.stats = SelectionStats.for_catalog(catalog)
        self._next_refresh = next_refresh_time(current_time, self._refresh_interval)
        logger.info(
            f"Loaded {len(catalog)} catalog items, next refresh at "
            f"{self._next_refresh.isoformat()}"
        )
        return playlist

    async def begin(self) -> CarouselState:
        """Build the first playlist and put the first item on screen."""
        async with self._lock:
            now = self._clock()
            playlist, content = self._rebuild(now).advance(now, self._draw, self._strict)
            self.stats.record_selection(playlist.current_index, content.duration)
            await self._presenter.show(content)
            self.state = Displaying(playlist, content)
            return self.state

    async def step(self) -> CarouselState:
        """
        Move to the next item.

        Chooses the successor, waits for it to preload (at most
        ``preload_timeout`` seconds) and swaps it on screen.

        Returns:
            The new Displaying state
        """
        if self.state is None:
            return await self.begin()

        async with self._lock:
            now = self._clock()
            playlist = self.state.playlist

            if self._next_refresh is not None and now >= self._next_refresh:
                try:
                    playlist = self._rebuild(now)
                except ConfigurationError as e:
                    self._next_refresh = next_refresh_time(now, self._refresh_interval)
                    logger.error(
                        f"Catalog reload failed, keeping current playlist until "
                        f"{self._next_refresh.isoformat()}: {e}"
                    )

            playlist, next_content = playlist.advance(now, self._draw, self._strict)
            self.stats.record_selection(playlist.current_index, next_content.duration)
            self.state = LoadingNext(playlist, self.state.current_content, next_content)

            try:
                await asyncio.wait_for(
                    self._presenter.preload(next_content), timeout=self._preload_timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Preloading {next_content.url} took longer than "
                    f"{self._preload_timeout:g}s, showing it anyway"
                )

            await self._presenter.show(next_content)
            self.state = Displaying(playlist, next_content)
            logger.debug(f"Selection stats: {self.stats.to_dict()}")
            return self.state

    async def run(self) -> None:
        """Rotate until stopped or cancelled."""
        self._running = True
        try:
            if self.state is None:
                await self.begin()

            while self._running:
                try:
                    await self._sleep(self.state.current_content.duration)
                    await self.step()

                except asyncio.CancelledError:
                    break
                except CarrouselError as e:
                    if not e.is_retryable:
                        logger.error(f"Carousel stopped: {e}")
                        raise
                    logger.warning(f"Carousel step failed, retrying: {e}")
                    await self._sleep(self._retry_delay)
                except Exception as e:
                    logger.error(f"Carousel error: {e}", exc_info=True)
                    await self._sleep(self._retry_delay)
        finally:
            self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def _collect_result(self, task: asyncio.Task) -> None:
        """Keep the error a finished background loop died with."""
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.last_error = error

    async def start(self) -> None:
        """Start rotating in a background task."""
        if self._loop_task is not None and not self._loop_task.done():
            return

        self.last_error = None
        self._running = True
        self._loop_task = asyncio.create_task(self.run())
        self._loop_task.add_done_callback(self._collect_result)
        logger.info("Carousel started")

    async def stop(self) -> None:
        """Stop rotating. A loop that already died is cleaned up without raising."""
        if self._loop_task is None:
            return

        self._running = False
        task, self._loop_task = self._loop_task, None

        if task.done():
            self._collect_result(task)
        else:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info("Carousel stopped")
