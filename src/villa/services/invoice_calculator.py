"""Room, meal and tax arithmetic behind every invoice."""
from decimal import Decimal
from typing import List, Optional, Sequence

from villa.models.bookings import Booking, MealCategory
from villa.models.invoice import InvoiceLineItem, InvoiceTotals
from villa.utils.custom_exceptions import InvalidDateRange, MissingPriceConfiguration, TotalsMismatch
from villa.utils.datetime_normaliser import DateLike, calendar_day, local_tz
from villa.utils.money import require_amount, require_percent, round_half_up

ROOM_CHARGES_LABEL = "Room Charges"

MEAL_LABELS = {
    MealCategory.VEG: "Veg Meal",
    MealCategory.NON_VEG: "Non-Veg Meal",
    MealCategory.COMBO: "Combo Meal",
}


def nights_between(start: DateLike, end: DateLike) -> int:
    """Nights stayed between two calendar days, never less than one."""
    tz = local_tz(start)
    start_day = calendar_day(start, tz)
    end_day = calendar_day(end, tz)
    if end_day < start_day:
        raise InvalidDateRange(f"end date {end_day} is before start date {start_day}")
    return max(1, (end_day - start_day).days)


def _require_nights(nights: int) -> None:
    if isinstance(nights, bool) or not isinstance(nights, int) or nights < 1:
        raise InvalidDateRange(f"a stay is at least one night, got {nights!r}")


def room_line_item(booking: Booking, nights: int) -> InvoiceLineItem:
    if booking.room_total is not None:
        return InvoiceLineItem.of(
            ROOM_CHARGES_LABEL, require_amount(booking.room_total, "room_total"), 1
        )
    price = require_amount(booking.price_per_night, "price_per_night")
    _require_nights(nights)
    return InvoiceLineItem.of(ROOM_CHARGES_LABEL, price, nights)


def meal_line_items(booking: Booking, nights: Optional[int] = None) -> List[InvoiceLineItem]:
    if nights is None:
        nights = nights_between(booking.start_date, booking.end_date)
    _require_nights(nights)

    items = []
    for category, label in MEAL_LABELS.items():
        guests = booking.guests_for(category)
        if guests < 0:
            raise ValueError(f"{category.value} guest count cannot be negative")
        if guests == 0:
            continue
        price = booking.meal_prices.price_for(category)
        if price is None:
            raise MissingPriceConfiguration(label)
        require_amount(price, f"{label} price")
        items.append(InvoiceLineItem.of(label, price, guests * nights))
    return items


def invoice_total(
    room_total: int, meal_items: Sequence[InvoiceLineItem], tax_rate_percent: int
) -> InvoiceTotals:
    require_amount(room_total, "room_total")
    require_percent(tax_rate_percent, "tax_rate_percent")

    sub_total = room_total + sum(item.line_total for item in meal_items)
    tax = round_half_up(Decimal(sub_total) * Decimal(tax_rate_percent) / Decimal(100))
    return InvoiceTotals(
        sub_total=sub_total,
        tax=tax,
        grand_total=sub_total + tax,
        tax_rate_percent=tax_rate_percent,
    )


def check_booking_totals(
    booking: Booking, room_item: InvoiceLineItem, meal_items: Sequence[InvoiceLineItem]
) -> None:
    """Reject a booking whose stored totals disagree with its line items or its amount."""
    meal_total = sum(item.line_total for item in meal_items)
    if booking.meal_total is not None and booking.meal_total != meal_total:
        raise TotalsMismatch(
            f"booking {booking.booking_id}: stored meal total {booking.meal_total} "
            f"!= computed {meal_total}"
        )
    if room_item.line_total + meal_total != booking.amount:
        raise TotalsMismatch(
            f"booking {booking.booking_id}: room {room_item.line_total} + meals {meal_total} "
            f"!= amount {booking.amount}"
        )
