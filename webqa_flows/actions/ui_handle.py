import logging
from typing import Any, Optional, Pattern, Protocol, Union

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class UIHandle(Protocol):
    """Browser capabilities the page objects rely on.

    Locator factories are synchronous and lazy, like Playwright's: nothing touches the
    page until one of the async methods is awaited. ``is_visible``/``is_attached``/
    ``is_hidden`` wait up to ``timeout`` milliseconds and report the outcome instead of
    raising.
    """

    def get_by_role(self, role: str, name: Union[str, Pattern, None] = None, exact: bool = False) -> Any: ...

    def get_by_text(self, text: Union[str, Pattern], exact: bool = False) -> Any: ...

    def locate(self, selector: str, within: Any = None, nth: Optional[int] = None) -> Any: ...

    async def count(self, element) -> int: ...

    async def click(self, element, timeout: Optional[int] = None) -> None: ...

    async def type(self, element, text: str, timeout: Optional[int] = None) -> None: ...

    async def text(self, element, timeout: Optional[int] = None) -> Optional[str]: ...

    async def is_visible(self, element, timeout: Optional[int] = None) -> bool: ...

    async def is_attached(self, element, timeout: Optional[int] = None) -> bool: ...

    async def is_hidden(self, element, timeout: Optional[int] = None) -> bool: ...

    async def wait_for_network_idle(self, timeout: Optional[int] = None) -> None: ...


class PlaywrightUIHandle:
    """UIHandle backed by a Playwright async ``Page``."""

    def __init__(self, page: Page):
        self.page = page

    def get_by_role(self, role, name=None, exact=False) -> Locator:
        if name is None:
            return self.page.get_by_role(role)
        return self.page.get_by_role(role, name=name, exact=exact)

    def get_by_text(self, text, exact=False) -> Locator:
        return self.page.get_by_text(text, exact=exact)

    def locate(self, selector, within=None, nth=None) -> Locator:
        locator = (within if within is not None else self.page).locator(selector)
        if nth is not None:
            locator = locator.nth(nth)
        return locator

    async def count(self, element: Locator) -> int:
        return await element.count()

    async def click(self, element: Locator, timeout=None) -> None:
        await element.click(timeout=timeout)

    async def type(self, element: Locator, text, timeout=None) -> None:
        await element.fill(text, timeout=timeout)

    async def text(self, element: Locator, timeout=None) -> Optional[str]:
        return await element.text_content(timeout=timeout)

    async def _wait_for_state(self, element: Locator, state: str, timeout) -> bool:
        try:
            await element.wait_for(state=state, timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            logging.debug(f"Element {element} did not become {state} within {timeout}ms")
            return False

    async def is_visible(self, element: Locator, timeout=None) -> bool:
        return await self._wait_for_state(element, "visible", timeout)

    async def is_attached(self, element: Locator, timeout=None) -> bool:
        return await self._wait_for_state(element, "attached", timeout)

    async def is_hidden(self, element: Locator, timeout=None) -> bool:
        return await self._wait_for_state(element, "hidden", timeout)

    async def wait_for_network_idle(self, timeout=None) -> None:
        await self.page.wait_for_load_state("networkidle", timeout=timeout)
