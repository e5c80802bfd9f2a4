"""Sample test unit: the sandbox calls ``run`` once with a fresh Playwright page."""

from playwright.async_api import Page


async def run(page: Page) -> None:
    await page.goto("https://example.com")

    title = await page.title()
    if title != "Example Domain":
        raise AssertionError(f'Expected title "Example Domain" but got "{title}"')
