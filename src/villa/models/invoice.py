from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from villa.utils.money import require_amount


@dataclass(frozen=True)
class InvoiceLineItem:
    label: str
    unit_price: int
    quantity: int
    line_total: int

    @classmethod
    def of(cls, label: str, unit_price: int, quantity: int) -> "InvoiceLineItem":
        return cls(
            label=label,
            unit_price=unit_price,
            quantity=quantity,
            line_total=unit_price * quantity,
        )

    def __post_init__(self):
        require_amount(self.unit_price, f"{self.label} unit price")
        require_amount(self.quantity, f"{self.label} quantity")
        if self.line_total != self.unit_price * self.quantity:
            raise ValueError(
                f"line total {self.line_total} != {self.unit_price} x {self.quantity}"
            )


@dataclass(frozen=True)
class InvoiceTotals:
    sub_total: int
    tax: int
    grand_total: int
    tax_rate_percent: int


@dataclass
class Invoice:
    invoice_number: str
    booking_id: str
    user_email: str
    room_name: str
    checkin: date
    checkout: date
    nights: int
    price_per_night: int
    room_charges: InvoiceLineItem
    meal_items: List[InvoiceLineItem]
    totals: InvoiceTotals
    currency: str = "INR"
    payment_provider: Optional[str] = None
    payment_id: Optional[str] = None
    line_items: List[InvoiceLineItem] = field(init=False)

    def __post_init__(self):
        self.line_items = [self.room_charges, *self.meal_items]
