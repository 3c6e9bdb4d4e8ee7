import pytest

from webqa_flows.config import RetryPolicy, UiSettings
from webqa_flows.errors import (
    DeleteNotConfirmedError,
    ElementNotReadyError,
    InvalidArgumentError,
    NavigationError,
)
from webqa_flows.pages import PimPage, SearchStatus

from .conftest import FakeUIHandle

EMPLOYEE_LIST = "Employee List"
ADD_EMPLOYEE = "Add Employee"


def employee_list_link(ui):
    return ui.get_by_role("link", name=EMPLOYEE_LIST, exact=True)


@pytest.mark.asyncio
async def test_search_finds_single_row(ui_settings):
    ui = FakeUIHandle(row_counts=[1])
    page = PimPage(ui, ui_settings)

    assert await page.search_by_name("Jane", "Doe", EMPLOYEE_LIST) is True
    assert ui.count_calls == 1
    assert (page.employee_name_text_box, "Jane Doe") in ui.typed
    assert ui.clicks[:2] == [employee_list_link(ui), page.search_button]
    assert ("attached", page.emp_list_table, 500) in ui.waits


@pytest.mark.asyncio
async def test_search_returns_false_after_all_attempts_are_empty(ui_settings):
    ui = FakeUIHandle(row_counts=[0, 0, 0])
    page = PimPage(ui, ui_settings)

    assert await page.search_by_name("Jane", "Doe", EMPLOYEE_LIST) is False
    assert ui.count_calls == 3


@pytest.mark.asyncio
async def test_search_retry_exits_on_first_nonzero_count(ui_settings):
    ui = FakeUIHandle(row_counts=[0, 0, 1])
    page = PimPage(ui, ui_settings)

    assert await page.search_by_name("Jane", "Doe", EMPLOYEE_LIST) is True
    assert ui.count_calls == 3


@pytest.mark.asyncio
async def test_search_respects_configured_retry_policy():
    settings = UiSettings(custom_wait_ms=100, row_count_retry=RetryPolicy(max_attempts=5, delay_ms=1))
    ui = FakeUIHandle(row_counts=[0, 0, 0, 0, 1])
    page = PimPage(ui, settings)

    assert await page.search_by_name("Jane", "Doe", EMPLOYEE_LIST) is True
    assert ui.count_calls == 5


@pytest.mark.asyncio
async def test_multiple_matches_are_ambiguous_and_not_found(ui_settings):
    ui = FakeUIHandle(row_counts=[2])
    page = PimPage(ui, ui_settings)

    outcome = await page.locate_by_name("Jane", "Doe", EMPLOYEE_LIST)
    assert outcome.status is SearchStatus.AMBIGUOUS
    assert outcome.found is False
    assert outcome.location is None

    ui = FakeUIHandle(row_counts=[2])
    assert await PimPage(ui, ui_settings).search_by_name("Jane", "Doe", EMPLOYEE_LIST) is False


@pytest.mark.asyncio
async def test_locate_returns_first_row_and_trims_names(ui_settings):
    ui = FakeUIHandle(rows=1)
    outcome = await PimPage(ui, ui_settings).locate_by_name("  Jane ", " Doe", EMPLOYEE_LIST)

    assert outcome.full_name == "Jane Doe"
    assert outcome.location.row_index == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "first, last, sub_menu",
    [("", "Doe", EMPLOYEE_LIST), ("Jane", "   ", EMPLOYEE_LIST), ("Jane", "Doe", ""), (None, "Doe", EMPLOYEE_LIST)],
)
async def test_search_rejects_blank_arguments_before_touching_ui(ui_settings, first, last, sub_menu):
    ui = FakeUIHandle(rows=1)
    with pytest.raises(InvalidArgumentError):
        await PimPage(ui, ui_settings).search_by_name(first, last, sub_menu)
    assert ui.clicks == [] and ui.count_calls == 0


@pytest.mark.asyncio
async def test_missing_sub_menu_link_is_navigation_error(ui_settings):
    ui = FakeUIHandle(rows=1)
    ui.invisible.add(employee_list_link(ui))

    with pytest.raises(NavigationError, match=EMPLOYEE_LIST):
        await PimPage(ui, ui_settings).search_by_name("Jane", "Doe", EMPLOYEE_LIST)
    assert ui.count_calls == 0


@pytest.mark.asyncio
async def test_unexpected_ui_failure_is_wrapped_with_cause(ui_settings):
    lookup_ui = FakeUIHandle()
    search_button = lookup_ui.get_by_role("button", name="Search")
    ui = FakeUIHandle(rows=1, failing_clicks=[search_button])

    with pytest.raises(ElementNotReadyError, match="Jane Doe") as exc_info:
        await PimPage(ui, ui_settings).search_by_name("Jane", "Doe", EMPLOYEE_LIST)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_delete_row_confirms_and_waits_for_dialog_to_close(ui_settings):
    ui = FakeUIHandle(rows=1)
    page = PimPage(ui, ui_settings)

    await page.delete_row(0, 1)

    assert ui.clicks == [page.get_row_action_button(0, 1), page.delete_yes_button]
    assert ui.network_idle_calls == 1
    assert ("hidden", page.delete_confirm_popup, 500) in ui.waits
    assert ui.rows == 0


@pytest.mark.asyncio
async def test_delete_row_fails_when_confirmation_never_hides(ui_settings):
    ui = FakeUIHandle(rows=1, confirm_hides=False)

    with pytest.raises(DeleteNotConfirmedError):
        await PimPage(ui, ui_settings).delete_row(0, 0)
    assert len([w for w in ui.waits if w[0] == "hidden"]) == 1


@pytest.mark.asyncio
async def test_delete_row_fails_when_confirmation_never_shows(ui_settings):
    ui = FakeUIHandle(rows=1)
    page = PimPage(ui, ui_settings)
    ui.invisible.add(page.delete_confirm_popup)

    with pytest.raises(ElementNotReadyError):
        await page.delete_row(0, 0)
    assert page.delete_yes_button not in ui.clicks


@pytest.mark.asyncio
@pytest.mark.parametrize("row_index, action_position", [(-1, 0), (0, -2), ("0", 0)])
async def test_delete_row_rejects_bad_indices(ui_settings, row_index, action_position):
    ui = FakeUIHandle(rows=1)
    with pytest.raises(InvalidArgumentError):
        await PimPage(ui, ui_settings).delete_row(row_index, action_position)
    assert ui.clicks == []


@pytest.mark.asyncio
async def test_ensure_deleted_is_idempotent(ui_settings):
    ui = FakeUIHandle(rows=1)
    page = PimPage(ui, ui_settings)

    assert await page.ensure_deleted("Jane", "Doe", EMPLOYEE_LIST, 0, 0) is True
    assert await page.ensure_deleted("Jane", "Doe", EMPLOYEE_LIST, 0, 0) is False

    assert len(ui.delete_clicks) == 1
    assert ui.rows == 0


@pytest.mark.asyncio
async def test_ensure_deleted_defaults_to_located_row(ui_settings):
    ui = FakeUIHandle(rows=1)
    page = PimPage(ui, ui_settings)

    await page.ensure_deleted("Jane", "Doe", EMPLOYEE_LIST)

    assert ui.delete_clicks == [page.get_row_action_button(0, ui_settings.delete_action_position)]


@pytest.mark.asyncio
async def test_ensure_deleted_skips_ambiguous_match(ui_settings):
    ui = FakeUIHandle(rows=3)

    assert await PimPage(ui, ui_settings).ensure_deleted("Jane", "Doe", EMPLOYEE_LIST) is False
    assert ui.delete_clicks == []


@pytest.mark.asyncio
async def test_create_record_fills_form_and_observes_spinner(ui_settings):
    ui = FakeUIHandle()
    page = PimPage(ui, ui_settings)

    assert await page.create_record("Jane", "Doe", ADD_EMPLOYEE) is True

    assert ui.typed == [(page.emp_first_name_text_box, "Jane"), (page.emp_last_name_text_box, "Doe")]
    assert ui.clicks[-1] == page.save_emp_button
    assert ("visible", page.save_loading_spinner, 500) in ui.waits
    assert not any(w[0] == "hidden" for w in ui.waits)


@pytest.mark.asyncio
async def test_create_record_without_spinner_reports_false(ui_settings):
    ui = FakeUIHandle()
    page = PimPage(ui, ui_settings)
    ui.invisible.add(page.save_loading_spinner)

    assert await page.create_record("Jane", "Doe", ADD_EMPLOYEE) is False


@pytest.mark.asyncio
async def test_expected_page_header_compares_trimmed_text(ui_settings):
    page = PimPage(FakeUIHandle(), ui_settings)

    assert await page.expected_page_header("PIM") is True
    assert await page.expected_page_header("Admin") is False
