from .base_page import BasePage
from .pim_page import PimPage, RecordLocation, SearchOutcome, SearchStatus

__all__ = ["BasePage", "PimPage", "SearchOutcome", "SearchStatus", "RecordLocation"]
