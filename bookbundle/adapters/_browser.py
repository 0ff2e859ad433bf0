"""Playwright helper for reading a cart page as the browser renders it."""

_PLAYWRIGHT_AVAILABLE = False
try:
    from playwright.async_api import async_playwright
    _PLAYWRIGHT_AVAILABLE = True
except ImportError:
    pass

INSTALL_HINT = (
    "Playwright is not installed. "
    "Install it with: pip install bookbundle[browser] && playwright install chromium"
)


def is_available() -> bool:
    return _PLAYWRIGHT_AVAILABLE


async def fetch_rendered_html(
    url: str,
    wait_selector: str | None = None,
    user_data_dir: str | None = None,
    timeout: int = 15000,
) -> str:
    """Open ``url`` in Chromium and return the rendered markup.

    The cart only lists items for a signed-in shopper, so a persistent
    ``user_data_dir`` can be passed to reuse an existing browser profile.
    """
    if not is_available():
        raise RuntimeError(INSTALL_HINT)

    async with async_playwright() as p:
        if user_data_dir:
            context = await p.chromium.launch_persistent_context(user_data_dir, headless=False)
            browser = None
        else:
            browser = await p.chromium.launch(headless=True)
            context = await browser.new_context()
        page = await context.new_page()
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout)
            if wait_selector:
                await page.wait_for_selector(wait_selector, timeout=timeout)
            else:
                await page.wait_for_timeout(2000)
            html = await page.content()
        finally:
            await context.close()
            if browser is not None:
                await browser.close()

    return html
