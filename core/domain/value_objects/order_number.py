"""Order number value object."""
import re
from dataclasses import dataclass
from datetime import date

from ..exceptions import ConflictError


_ORDER_NUMBER_RE = re.compile(r"^ORD-(\d{8})-(\d{3})$")

MAX_DAILY_SEQUENCE = 999


@dataclass(frozen=True)
class OrderNumber:
    """
    Human-readable order identifier.
    
    Format: ORD-YYYYMMDD-NNN (UTC creation date, daily sequence padded to 3 digits,
    at most 999 orders per day)
    Examples:
    - ORD-20250114-001
    - ORD-20250114-042
    """
    value: str
    
    def __post_init__(self):
        if not self.value:
            raise ValueError("Order number cannot be empty")
        
        if not _ORDER_NUMBER_RE.match(self.value):
            raise ValueError(
                f"Invalid order number format (expected ORD-YYYYMMDD-NNN): {self.value}"
            )
    
    @classmethod
    def for_day(cls, day: date, sequence: int) -> "OrderNumber":
        """Build the order number for the given day and 1-based sequence.

        Raises:
            ConflictError: The day already has MAX_DAILY_SEQUENCE orders
        """
        if sequence < 1:
            raise ValueError(f"Sequence must be positive, got: {sequence}")
        if sequence > MAX_DAILY_SEQUENCE:
            raise ConflictError(
                f"Daily order number sequence exhausted for {day.isoformat()}",
                day=day.isoformat(),
            )
        return cls(value=f"ORD-{day.strftime('%Y%m%d')}-{sequence:03d}")
    
    @property
    def sequence(self) -> int:
        return int(_ORDER_NUMBER_RE.match(self.value).group(2))
    
    def __str__(self) -> str:
        return self.value
