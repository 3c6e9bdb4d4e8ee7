import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from webqa_flows.config import RetryPolicy
from webqa_flows.errors import (
    DeleteNotConfirmedError,
    ElementNotReadyError,
    FlowError,
    NavigationError,
)
from webqa_flows.pages.base_page import BasePage
from webqa_flows.utils.validation import require_index, require_text

NAME_FILTER_XPATH = (
    "xpath=//div[@class = 'oxd-table-filter-area']/form/div[1]/div[1]/div[1]/div[1]/div[2]/div[1]/div[1]/input"
)


class SearchStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class RecordLocation:
    """Row of a located record. Only valid until the next UI-mutating action."""

    row_index: int


@dataclass(frozen=True)
class SearchOutcome:
    full_name: str
    row_count: int

    @property
    def status(self) -> SearchStatus:
        if self.row_count == 1:
            return SearchStatus.FOUND
        if self.row_count > 1:
            return SearchStatus.AMBIGUOUS
        return SearchStatus.NOT_FOUND

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND

    @property
    def location(self) -> Optional[RecordLocation]:
        # exactly one matching row means it is the first row of the filtered table
        return RecordLocation(row_index=0) if self.found else None


class PimPage(BasePage):
    """Employee records in the OrangeHRM PIM module: search, create, and idempotent
    cleanup through the UI."""

    def __init__(self, ui, settings=None):
        super().__init__(ui, settings)
        self.retry_policy: RetryPolicy = self.settings.row_count_retry

        self.header = ui.get_by_role("heading", name="PIM")
        self.employee_name_text_box = ui.locate(NAME_FILTER_XPATH)
        self.search_button = ui.get_by_role("button", name="Search")
        self.emp_list_table = ui.locate(".oxd-table-body", within=ui.locate(".orangehrm-container"))
        self.emp_record_row = ui.locate(".oxd-table-card", within=self.emp_list_table)
        self.delete_confirm_popup = ui.get_by_text("Are you Sure?")
        self.delete_yes_button = ui.get_by_role("button", name=re.compile(r"yes,\s*delete", re.IGNORECASE))
        self.emp_first_name_text_box = ui.get_by_role("textbox", name="First Name")
        self.emp_last_name_text_box = ui.get_by_role("textbox", name="Last Name")
        self.save_emp_button = ui.get_by_role("button", name="Save")
        self.save_loading_spinner = ui.locate(".oxd-loading-spinner")

    # Dynamic locators

    def get_row_action_button(self, row_index: int, action_position: int):
        row = self.ui.locate(".oxd-table-card", within=self.emp_list_table, nth=row_index)
        actions = self.ui.locate(".oxd-table-cell-actions", within=row)
        return self.ui.locate("button", within=actions, nth=action_position)

    def get_sub_menu_link(self, sub_menu_text: str):
        sub_menu_text = require_text(sub_menu_text, "sub menu text")
        logging.info(f"Getting PIM Sub Menu link for: {sub_menu_text}")
        return self.ui.get_by_role("link", name=sub_menu_text, exact=True)

    async def _open_sub_menu(self, sub_menu_text: str) -> None:
        logging.info(f"Navigating to PIM Sub Menu: {sub_menu_text}")
        link = self.get_sub_menu_link(sub_menu_text)
        await self.expect_to_be_visible(link, f"PIM Sub Menu link '{sub_menu_text}'", error_cls=NavigationError)
        await self.click_element(link)
        logging.info(f"Navigated to PIM Sub Menu: {sub_menu_text} successfully.")

    # Page specific methods

    async def expected_page_header(self, page_header: str) -> bool:
        expected = require_text(page_header, "page header")
        try:
            logging.info(f"Waiting for page header to be visible: {expected}")
            await self.expect_to_be_visible(self.header, "Page header")
            actual = (await self.get_element_text(self.header) or "").strip()
        except FlowError:
            raise
        except Exception as e:
            error_msg = f"Error while verifying page header '{expected}': {e}"
            logging.error(error_msg)
            raise ElementNotReadyError(error_msg) from e

        logging.info(f"Actual page header: '{actual}', Expected page header: '{expected}'")
        is_match = actual == expected
        if is_match:
            logging.info("Page header matches the expected value.")
        else:
            logging.warning("Page header does NOT match the expected value.")
        return is_match

    async def get_table_row_count(self, row_locator, policy: Optional[RetryPolicy] = None) -> int:
        """Count rows, re-querying until a non-zero count shows up or attempts run out.

        Rows render after the table container is attached, so a single zero reading
        cannot tell "still rendering" from "no rows".
        """
        policy = policy or self.retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            row_count = await self.ui.count(row_locator)
            if row_count > 0:
                logging.info(f"Total number of rows present in the table are: {row_count}")
                return row_count

            logging.info(f"Retrying to get table row count. Attempt {attempt} of {policy.max_attempts}")
            if policy.delay_ms and attempt < policy.max_attempts:
                await asyncio.sleep(policy.delay_ms / 1000)
        return 0

    async def locate_by_name(self, first_name: str, last_name: str, pim_sub_menu: str) -> SearchOutcome:
        first_name = require_text(first_name, "firstName")
        last_name = require_text(last_name, "lastName")
        pim_sub_menu = require_text(pim_sub_menu, "pimSubMenu")
        full_name = f"{first_name} {last_name}"

        try:
            await self._open_sub_menu(pim_sub_menu)

            logging.info(f"Entering employee name in search box: {full_name}")
            await self.expect_to_be_visible(self.employee_name_text_box, "Employee name search box")
            await self.type_in_element(self.employee_name_text_box, full_name)

            logging.info("Clicking on Search button to search for employee.")
            await self.expect_to_be_visible(self.search_button, "Search button")
            await self.click_element(self.search_button)

            # attached, not visible: the table container exists before its layout settles
            logging.info("Waiting for search results to load.")
            await self.expect_to_be_attached(self.emp_list_table, "Employee list table")

            row_count = await self.get_table_row_count(self.emp_record_row)
        except FlowError as e:
            logging.error(f"Error during employee search for '{full_name}': {e}")
            raise
        except Exception as e:
            error_msg = f"Error during employee search for '{full_name}': {e}"
            logging.error(error_msg)
            raise ElementNotReadyError(error_msg) from e

        outcome = SearchOutcome(full_name=full_name, row_count=row_count)
        logging.info(f"Number of records found for employee '{full_name}': {row_count}")
        if outcome.status is SearchStatus.FOUND:
            logging.info(f"Employee '{full_name}' found in the search results.")
        elif outcome.status is SearchStatus.AMBIGUOUS:
            logging.warning(f"Employee '{full_name}' matched {row_count} rows; treating as NOT found.")
        else:
            logging.info(f"Employee '{full_name}' NOT found in the search results.")
        return outcome

    async def search_by_name(self, first_name: str, last_name: str, pim_sub_menu: str) -> bool:
        """Search the employee list and report whether exactly one record matched."""
        outcome = await self.locate_by_name(first_name, last_name, pim_sub_menu)
        return outcome.found

    async def delete_row(self, row_index: int, action_position: int) -> None:
        row_index = require_index(row_index, "row_index")
        action_position = require_index(action_position, "action_position")
        logging.info(f"Initiating delete action for row {row_index} (action {action_position}).")

        delete_button = self.get_row_action_button(row_index, action_position)
        try:
            await self.click_element(delete_button)

            logging.info("Waiting for delete confirmation popup to be visible.")
            await self.expect_to_be_visible(self.delete_confirm_popup, "Delete confirmation popup")

            logging.info("Clicking on 'Yes, Delete' button to confirm deletion.")
            await self.click_element(self.delete_yes_button)

            await self.ui.wait_for_network_idle(timeout=self.custom_wait)
            logging.info("Waiting for delete confirmation popup to be hidden.")
            await self.expect_to_be_hidden(
                self.delete_confirm_popup, "Delete confirmation popup", error_cls=DeleteNotConfirmedError
            )
        except FlowError as e:
            logging.error(f"Error while deleting row {row_index}: {e}")
            raise
        except Exception as e:
            error_msg = f"Error while deleting row {row_index}: {e}"
            logging.error(error_msg)
            raise ElementNotReadyError(error_msg) from e

        logging.info("Row deleted successfully.")

    async def ensure_deleted(
        self,
        first_name: str,
        last_name: str,
        pim_sub_menu: str,
        row_index: Optional[int] = None,
        action_position: Optional[int] = None,
    ) -> bool:
        """Delete the employee if it exists, so a test starts from a clean state.

        Safe to call unconditionally. ``row_index`` defaults to the located row. Returns
        whether a delete was performed.
        """
        outcome = await self.locate_by_name(first_name, last_name, pim_sub_menu)

        if not outcome.found:
            logging.info(f"User '{outcome.full_name}' does not exist. Skipping the deletion.")
            return False

        if row_index is None:
            row_index = outcome.location.row_index
        if action_position is None:
            action_position = self.settings.delete_action_position

        logging.info(f"User '{outcome.full_name}' already exists. Deleting the user for clean state.")
        await self.delete_row(row_index, action_position)
        return True

    async def create_record(self, first_name: str, last_name: str, pim_sub_menu: str) -> bool:
        """Fill and submit the Add Employee form.

        Returns as soon as the save spinner shows (or the wait for it runs out); it does
        not wait for the save to finish. Returns whether the spinner was seen.
        """
        first_name = require_text(first_name, "firstName")
        last_name = require_text(last_name, "lastName")
        pim_sub_menu = require_text(pim_sub_menu, "pimSubMenu")

        try:
            await self._open_sub_menu(pim_sub_menu)

            logging.info("Entering first and last name of the user.")
            await self.expect_to_be_visible(self.emp_first_name_text_box, "First Name textbox")
            await self.type_in_element(self.emp_first_name_text_box, first_name)
            await self.type_in_element(self.emp_last_name_text_box, last_name)

            logging.info("Clicking on Save button to create new user.")
            await self.click_element(self.save_emp_button)

            save_started = await self.is_element_visible(self.save_loading_spinner)
        except FlowError as e:
            logging.error(f"Error while creating user '{first_name} {last_name}': {e}")
            raise
        except Exception as e:
            error_msg = f"Error while creating user '{first_name} {last_name}': {e}"
            logging.error(error_msg)
            raise ElementNotReadyError(error_msg) from e

        if save_started:
            logging.info(f"Save in progress for user '{first_name} {last_name}'.")
        else:
            logging.warning(f"Save spinner not observed for user '{first_name} {last_name}'.")
        return save_started
