from .order import OPEN_STATUSES, PAYABLE_STATUSES, Order, OrderStatus


__all__ = ["Order", "OrderStatus", "OPEN_STATUSES", "PAYABLE_STATUSES"]
