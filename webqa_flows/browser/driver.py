import logging

from playwright.async_api import async_playwright


class Driver:
    """Owns one Playwright instance, one Chromium browser, one context and one page."""

    @staticmethod
    async def create(browser_config):
        driver = Driver()
        await driver.launch(browser_config)
        return driver

    def __init__(self):
        self._is_closed = True
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self.config = None

    def is_closed(self):
        return self._is_closed

    async def launch(self, browser_config):
        """Start Chromium and open a page.

        Args:
            browser_config (dict): Browser configuration containing:
                - headless (bool): Whether to run browser in headless mode
                - viewport (dict): ``width`` and ``height`` of the viewport
                - language (str): Locale of the browser context

        Returns:
            Page: The new page.
        """
        viewport = browser_config["viewport"]
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=browser_config["headless"],
                args=[
                    "--disable-dev-shm-usage",  # Mitigate shared memory issues in Docker
                    "--no-sandbox",
                    "--disable-gpu",
                    f'--window-size={viewport["width"]},{viewport["height"]}',
                ],
            )
            self.context = await self.browser.new_context(
                viewport={"width": viewport["width"], "height": viewport["height"]},
                locale=browser_config.get("language", "en-US"),
            )
            self.page = await self.context.new_page()
            self.config = browser_config
            self._is_closed = False

            logging.debug(f"Browser instance created successfully with config: {browser_config}")
            return self.page

        except Exception:
            logging.error("Failed to create browser instance.", exc_info=True)
            await self.close()
            raise

    def get_page(self):
        return self.page

    async def close(self):
        """Closes the browser instance and stops Playwright."""
        try:
            if self.browser is not None:
                await self.browser.close()
            if self.playwright is not None:
                await self.playwright.stop()
            if not self._is_closed:
                logging.info("Browser instance closed successfully.")
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self.playwright = None
            self._is_closed = True
