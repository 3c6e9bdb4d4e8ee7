import json
import logging
from typing import Union

import httpx
from pydantic import ValidationError

from webqa_flows.api.base_controller import BaseController
from webqa_flows.api.models import OrderPayload
from webqa_flows.api.token_manager import TokenManager
from webqa_flows.config import ENV_BUY_ORDER_ENDPOINT, ApiSettings
from webqa_flows.errors import ConfigurationError, InvalidPayloadError
from webqa_flows.utils.validation import is_blank, require_text


class OrderController(BaseController):
    """Creates buy orders. Responses are returned as-is so the caller decides whether a
    given status is a pass or a fail."""

    def __init__(self, client: httpx.AsyncClient, token_manager: TokenManager, settings: ApiSettings):
        super().__init__(client, token_manager, settings)

        if is_blank(settings.buy_order_endpoint):
            error_msg = f"{ENV_BUY_ORDER_ENDPOINT} is not set or invalid in environment variables."
            logging.error(error_msg)
            raise ConfigurationError(error_msg)

        self.endpoint = settings.buy_order_endpoint.strip()
        logging.info(f"OrderController initialized with endpoint: {self.endpoint}")

    @staticmethod
    def _to_payload(payload: Union[OrderPayload, dict, None]) -> OrderPayload:
        if payload is None:
            error_msg = "Invalid payload provided for creating Buy Order: 'None'"
            logging.error(error_msg)
            raise InvalidPayloadError(error_msg)
        if isinstance(payload, OrderPayload):
            return payload
        try:
            return OrderPayload.model_validate(payload)
        except ValidationError as e:
            error_msg = f"Invalid payload provided for creating Buy Order: {e.error_count()} error(s): {e}"
            logging.error(error_msg)
            raise InvalidPayloadError(error_msg) from e

    async def create_order(self, payload: Union[OrderPayload, dict, None]) -> httpx.Response:
        body = self._to_payload(payload).to_wire()
        logging.info(f"Creating Buy Order with payload: {json.dumps(body, indent=2)}")

        try:
            response = await self.post(self.endpoint, body)
        except Exception as e:
            logging.error(f"Error creating Buy Order: {e}", exc_info=True)
            raise

        if response.is_success:
            try:
                order_id = response.json().get("id") or "N/A"
            except (ValueError, AttributeError):
                order_id = "N/A"
            logging.info(f"Buy order created successfully. Order ID: {order_id}")
        else:
            logging.warning(f"Failed to create Buy Order. Status: {response.status_code} - {response.reason_phrase}")

        return response

    async def get_order(self, order_id: str) -> httpx.Response:
        order_id = require_text(order_id, "order_id")
        url = f"{self.endpoint.rstrip('/')}/{order_id}"
        logging.info(f"Fetching Buy Order: {order_id}")
        try:
            response = await self.get(url)
        except Exception as e:
            logging.error(f"Error fetching Buy Order {order_id}: {e}", exc_info=True)
            raise
        if not response.is_success:
            logging.warning(f"Failed to fetch Buy Order {order_id}. Status: {response.status_code} - {response.reason_phrase}")
        return response
