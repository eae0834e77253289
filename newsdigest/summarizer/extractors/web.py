"""Web page extraction: fetch or render a page and keep its visible text."""

from __future__ import annotations

import logging
from typing import Optional

import anyio
import httpx
from bs4 import BeautifulSoup

from newsdigest.config import Settings
from newsdigest.summarizer.errors import EmptyContent, FetchFailed, InvalidReference
from newsdigest.summarizer.extractors.base import SourceExtractor
from newsdigest.summarizer.models import RawInput, SourceKind
from newsdigest.summarizer.text import normalize

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ["script", "style", "iframe", "noscript", "template", "svg"]


def validate_address(raw: RawInput) -> str:
    address = normalize(raw)
    if not address:
        raise InvalidReference("empty address")
    try:
        url = httpx.URL(address)
    except httpx.InvalidURL as exc:
        raise InvalidReference(f"malformed address: {address!r}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidReference(f"unsupported address: {address!r}")
    return str(url)


def html_to_text(html: str) -> str:
    """
    Very lightweight readability:
    - drop script/style/iframe/noscript nodes
    - prefer article/main/body, fall back to the title
    - return visible text, normalized
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    root = soup.find("article") or soup.find("main") or soup.body or soup
    text = root.get_text(separator=" ", strip=True)

    if not text and soup.title and soup.title.string:
        text = soup.title.string

    return normalize(text)


class WebPageExtractor(SourceExtractor):
    kind = SourceKind.WEB

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(settings)
        self.transport = transport

    async def extract(self, raw: RawInput) -> str:
        url = validate_address(raw)
        if self.settings.web_renderer == "browser":
            html = await self._render_html(url)
        else:
            html = await self._fetch_html(url)

        text = html_to_text(html)
        if not text:
            raise EmptyContent(f"no visible text at {url}")
        return text

    async def _fetch_html(self, url: str) -> str:
        headers = {
            "User-Agent": self.settings.http_user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        timeout = httpx.Timeout(self.settings.http_timeout_seconds)
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=timeout,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as exc:
            logger.warning(f"Page fetch returned {exc.response.status_code} for {url}")
            raise FetchFailed(f"status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Page fetch failed for {url}: {exc!r}")
            raise FetchFailed(str(exc)) from exc

    async def _render_html(self, url: str) -> str:
        try:
            from playwright.async_api import Error as PlaywrightError
            from playwright.async_api import async_playwright
        except ImportError as exc:
            logger.error("Browser rendering requested but playwright is not installed")
            raise FetchFailed("playwright not installed") from exc

        timeout_ms = self.settings.browser_timeout_ms
        try:
            with anyio.fail_after(timeout_ms / 1000 * 2):
                async with async_playwright() as playwright:
                    browser = await playwright.chromium.launch(
                        headless=True,
                        args=["--no-sandbox", "--disable-dev-shm-usage"],
                    )
                    try:
                        page = await browser.new_page(
                            user_agent=self.settings.http_user_agent
                        )
                        page.set_default_timeout(timeout_ms)
                        response = await page.goto(url, wait_until="domcontentloaded")
                        if response is not None and not response.ok:
                            raise FetchFailed(f"status {response.status}")
                        return await page.content()
                    finally:
                        await browser.close()
        except FetchFailed:
            raise
        except (PlaywrightError, TimeoutError) as exc:
            logger.warning(f"Page render failed for {url}: {exc!r}")
            raise FetchFailed(str(exc)) from exc
