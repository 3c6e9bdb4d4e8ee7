import asyncio
import json
import logging
import uuid
from typing import Any, Dict, Optional, Union

from playwright.async_api import Page

from webqa_flows.actions.ui_handle import PlaywrightUIHandle
from webqa_flows.browser.driver import Driver
from webqa_flows.config import DEFAULT_BROWSER_CONFIG
from webqa_flows.errors import NavigationError


def normalize_cookies(cookies: Union[str, dict, list, tuple]) -> list:
    """Normalize cookies into the list[dict] form Playwright expects."""
    if isinstance(cookies, str):
        cookie_list = json.loads(cookies)
    elif isinstance(cookies, dict):
        cookie_list = [cookies]
    elif isinstance(cookies, (list, tuple)):
        cookie_list = list(cookies)
    else:
        raise TypeError("Unsupported cookies type; expected str, dict or list")

    if not isinstance(cookie_list, list):
        raise ValueError("Parsed cookies is not a list")
    return cookie_list


class BrowserSession:
    """One remote UI session. The page behind it has a single focused state, so a
    session must only ever be driven by one coordinator at a time."""

    def __init__(self, session_id: str = None, browser_config: Dict[str, Any] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.browser_config = {**DEFAULT_BROWSER_CONFIG, **(browser_config or {})}
        self.driver: Optional[Driver] = None
        self._is_closed = False
        self._lock = asyncio.Lock()

    async def initialize(self):
        async with self._lock:
            if self._is_closed:
                raise RuntimeError("Browser session is closed")

            logging.debug(f"Initializing browser session {self.session_id} with config: {self.browser_config}")
            self.driver = await Driver.create(self.browser_config)
            logging.debug(f"Browser session {self.session_id} initialized successfully")
        return self

    async def navigate_to(self, url: str, cookies: Optional[Union[str, dict, list]] = None, timeout: int = 60000):
        page = self.get_page()
        logging.info(f"Session {self.session_id} navigating to: {url}")

        if cookies:
            await page.context.add_cookies(normalize_cookies(cookies))
            logging.info("Cookies added successfully")

        try:
            await page.goto(url, timeout=timeout, wait_until="domcontentloaded")
            await page.wait_for_load_state("networkidle", timeout=timeout)
        except Exception as e:
            logging.error(f"Navigation to {url} failed: {e}")
            raise NavigationError(f"Failed to navigate to {url}: {e}") from e

    def get_page(self) -> Page:
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver.get_page()

    def ui_handle(self) -> PlaywrightUIHandle:
        return PlaywrightUIHandle(self.get_page())

    def is_closed(self) -> bool:
        return self._is_closed

    async def close(self):
        async with self._lock:
            if self._is_closed:
                return

            logging.info(f"Closing browser session {self.session_id}")
            self._is_closed = True
            try:
                if self.driver:
                    await self.driver.close()
            finally:
                self.driver = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

