from .base_controller import BaseController
from .http_client import build_async_client
from .models import Amount, OrderIntent, OrderPayload, PurchaseUnit
from .order_controller import OrderController
from .token_manager import TokenManager

__all__ = [
    "build_async_client",
    "TokenManager",
    "BaseController",
    "OrderController",
    "OrderPayload",
    "OrderIntent",
    "PurchaseUnit",
    "Amount",
]
