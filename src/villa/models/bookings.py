from enum import Enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class MealCategory(str, Enum):
    VEG = "VEG"
    NON_VEG = "NON_VEG"
    COMBO = "COMBO"


@dataclass
class MealPrices:
    # per guest per night, locked onto the booking at payment time
    veg: Optional[int] = None
    non_veg: Optional[int] = None
    combo: Optional[int] = None

    def price_for(self, category: MealCategory) -> Optional[int]:
        return {
            MealCategory.VEG: self.veg,
            MealCategory.NON_VEG: self.non_veg,
            MealCategory.COMBO: self.combo,
        }[category]


@dataclass
class Booking:
    booking_id: str
    user_id: str
    user_email: str
    room_name: str
    start_date: date
    end_date: date
    amount: int
    status: BookingStatus = BookingStatus.CONFIRMED

    price_per_night: int = 0
    room_total: Optional[int] = None
    meal_total: Optional[int] = None

    veg_guests: int = 0
    non_veg_guests: int = 0
    combo_guests: int = 0
    meal_prices: MealPrices = field(default_factory=MealPrices)

    currency: str = "INR"
    payment_provider: Optional[str] = None
    payment_id: Optional[str] = None
    order_id: Optional[str] = None

    refund_percent: Optional[int] = None
    refund_amount: Optional[int] = None
    cancellation_fee: Optional[int] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None

    booked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def guests_for(self, category: MealCategory) -> int:
        return {
            MealCategory.VEG: self.veg_guests,
            MealCategory.NON_VEG: self.non_veg_guests,
            MealCategory.COMBO: self.combo_guests,
        }[category]

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED
