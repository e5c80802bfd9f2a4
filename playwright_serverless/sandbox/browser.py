"""Disposable Chromium sessions for sandboxed test execution."""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from playwright.async_api import Page, async_playwright

log = logging.getLogger(__name__)

# The execution host has no user namespaces and a tiny /dev/shm.
CHROMIUM_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--single-process",
)

type BrowserFactory = Callable[[], AbstractAsyncContextManager[Page]]


@asynccontextmanager
async def chromium_page() -> AsyncGenerator[Page, None]:
    """Launch headless Chromium and yield a page in a fresh context.

    The browser is closed on exit whether or not the body raised.
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=True, args=list(CHROMIUM_ARGS)
        )
        try:
            context = await browser.new_context()
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            log.debug("Browser closed")
