"""Avatar image cache.

Images are fetched ahead of rendering so drawing a frame never waits on the
network. A fetch or decode failure is remembered as "no image" and the
submitter glyph simply stays empty.
"""

import asyncio
import io
import logging
from urllib.parse import urljoin

import httpx
from PIL import Image

from newsgraph.config import settings

logger = logging.getLogger(__name__)


class AvatarCache:
    """Maps avatar URLs to decoded images (or None after a failure)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url if base_url is not None else settings.avatar_base_url
        self.timeout = timeout or settings.avatar_timeout
        self._client = client
        self._owns_client = client is None
        self._images: dict[str, Image.Image | None] = {}
        self._in_flight: dict[str, asyncio.Task] = {}

    def get(self, url: str | None) -> Image.Image | None:
        if not url:
            return None
        return self._images.get(url)

    def __contains__(self, url: str) -> bool:
        return url in self._images

    def resolve_url(self, url: str) -> str:
        """Absolute URL for a possibly relative avatar path."""
        return urljoin(self.base_url.rstrip("/") + "/", url) if self.base_url else url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def fetch(self, url: str) -> Image.Image | None:
        """Fetch and decode one avatar, caching the outcome."""
        if url in self._images:
            return self._images[url]

        image: Image.Image | None = None
        try:
            response = await self._get_client().get(self.resolve_url(url))
            response.raise_for_status()
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (httpx.HTTPError, OSError) as e:
            # OSError covers PIL.UnidentifiedImageError
            logger.debug(f"Avatar {url} unavailable: {e}")
            image = None

        self._images[url] = image
        return image

    def prefetch(self, urls: list[str | None]) -> list[asyncio.Task]:
        """Start background fetches for URLs not seen yet."""
        tasks = []
        for url in dict.fromkeys(u for u in urls if u):
            if url in self._images or url in self._in_flight:
                continue
            task = asyncio.create_task(self.fetch(url))
            self._in_flight[url] = task
            task.add_done_callback(lambda _, u=url: self._in_flight.pop(u, None))
            tasks.append(task)
        return tasks

    async def close(self) -> None:
        if self._in_flight:
            await asyncio.gather(*self._in_flight.values(), return_exceptions=True)
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
