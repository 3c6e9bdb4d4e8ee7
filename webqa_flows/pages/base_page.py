import logging
from typing import Optional, Type

from webqa_flows.actions.ui_handle import UIHandle
from webqa_flows.config import UiSettings
from webqa_flows.errors import ElementNotReadyError, FlowError


class BasePage:
    """Wait-then-act helpers shared by page objects.

    ``expect_*`` helpers raise a typed error when the element does not reach the expected
    state within ``custom_wait`` milliseconds; ``is_element_visible`` only reports it.
    """

    def __init__(self, ui: UIHandle, settings: Optional[UiSettings] = None):
        self.ui = ui
        self.settings = settings or UiSettings()
        self.custom_wait = self.settings.custom_wait_ms

    async def expect_to_be_visible(
        self, element, description: str, error_cls: Type[FlowError] = ElementNotReadyError, timeout=None
    ) -> None:
        timeout = timeout or self.custom_wait
        if not await self.ui.is_visible(element, timeout=timeout):
            error_msg = f"{description} not visible within {timeout}ms"
            logging.error(error_msg)
            raise error_cls(error_msg)

    async def expect_to_be_attached(self, element, description: str, timeout=None) -> None:
        timeout = timeout or self.custom_wait
        if not await self.ui.is_attached(element, timeout=timeout):
            error_msg = f"{description} not attached to the page within {timeout}ms"
            logging.error(error_msg)
            raise ElementNotReadyError(error_msg)

    async def expect_to_be_hidden(
        self, element, description: str, error_cls: Type[FlowError] = ElementNotReadyError, timeout=None
    ) -> None:
        timeout = timeout or self.custom_wait
        if not await self.ui.is_hidden(element, timeout=timeout):
            error_msg = f"{description} still visible after {timeout}ms"
            logging.error(error_msg)
            raise error_cls(error_msg)

    async def is_element_visible(self, element, timeout=None) -> bool:
        return await self.ui.is_visible(element, timeout=timeout or self.custom_wait)

    async def click_element(self, element) -> None:
        await self.ui.click(element, timeout=self.custom_wait)

    async def type_in_element(self, element, text: str) -> None:
        await self.ui.type(element, text, timeout=self.custom_wait)

    async def get_element_text(self, element) -> Optional[str]:
        return await self.ui.text(element, timeout=self.custom_wait)
