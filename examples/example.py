import asyncio
import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from dotenv import load_dotenv
load_dotenv()

from webqa_flows.api import OrderController, TokenManager, build_async_client
from webqa_flows.browser.session import BrowserSession
from webqa_flows.config import ApiSettings, RetryPolicy, UiSettings
from webqa_flows.pages import PimPage
from webqa_flows.utils.get_log import GetLog


async def clean_state_and_create_employee():
    ui_settings = UiSettings(
        base_url=os.getenv("PIM_URL", "https://opensource-demo.orangehrmlive.com/web/index.php/pim/viewEmployeeList"),
        custom_wait_ms=15000,
        row_count_retry=RetryPolicy(max_attempts=5, delay_ms=500),
        browser_config={"viewport": {"width": 1280, "height": 720}, "headless": False, "language": "en-US"},
        cookies=os.getenv("PIM_COOKIES"),
    )

    async with BrowserSession(browser_config=ui_settings.browser_config) as session:
        await session.navigate_to(ui_settings.base_url, cookies=ui_settings.cookies)
        pim_page = PimPage(session.ui_handle(), ui_settings)

        await pim_page.ensure_deleted("Jane", "Doe", "Employee List")
        await pim_page.create_record("Jane", "Doe", "Add Employee")


async def create_order():
    api_settings = ApiSettings.from_env()
    payload = {
        "intent": "CAPTURE",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "100.00"}}],
    }

    async with build_async_client(api_settings) as client:
        controller = OrderController(client, TokenManager(client), api_settings)
        response = await controller.create_order(payload)
        print(response.status_code, response.json())


if __name__ == "__main__":
    GetLog.get_log()
    asyncio.run(clean_state_and_create_employee())
    asyncio.run(create_order())
