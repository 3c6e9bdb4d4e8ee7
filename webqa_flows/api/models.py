from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class OrderIntent(str, Enum):
    CAPTURE = "CAPTURE"
    AUTHORIZE = "AUTHORIZE"


class Amount(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Legality of the code and positivity of the value are left to the server.
    currency_code: str = Field(min_length=3, max_length=3)
    value: str


class PurchaseUnit(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: Amount


class OrderPayload(BaseModel):
    """Buy order body, serialized with the wire names the order API expects."""

    model_config = ConfigDict(extra="allow")

    intent: str
    purchase_units: List[PurchaseUnit] = Field(min_length=1)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
