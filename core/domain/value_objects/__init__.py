"""Domain value objects."""

from .value_objects import ExecutionID, Money, round2
from .order_number import OrderNumber
from .financial import FeeBreakdown

__all__ = [
    "ExecutionID",
    "FeeBreakdown",
    "Money",
    "OrderNumber",
    "round2",
]
