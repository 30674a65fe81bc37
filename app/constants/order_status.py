from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Any status may be set from any other; kept as a single source for validation
ORDER_STATUSES = [s.value for s in OrderStatus]
