from typing import Optional

from villa.models.invoice import Invoice
from villa.repository.booking_repo import BookingRepository
from villa.services.invoice_calculator import (
    check_booking_totals,
    invoice_total,
    meal_line_items,
    nights_between,
    room_line_item,
)
from villa.services.mail_service import MailService
from villa.utils.constants import INVOICE_TAX_PERCENT
from villa.utils.custom_exceptions import NotFoundException


class InvoiceService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        mail_service: MailService,
        tax_rate_percent: int = INVOICE_TAX_PERCENT,
    ):
        self.booking_repo = booking_repo
        self.mail_service = mail_service
        self.tax_rate_percent = tax_rate_percent

    def send_invoice(self, booking_id: str, owner_id: Optional[str] = None) -> Invoice:
        invoice = self.generate_invoice(booking_id, owner_id)
        self.mail_service.send_invoice(invoice)
        return invoice

    def generate_invoice(self, booking_id: str, owner_id: Optional[str] = None) -> Invoice:
        """Build the invoice for a booking.

        When ``owner_id`` is given, bookings belonging to someone else are reported
        as missing.
        """
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None or (owner_id is not None and booking.user_id != owner_id):
            raise NotFoundException("booking", booking_id, 404)

        nights = nights_between(booking.start_date, booking.end_date)
        room_item = room_line_item(booking, nights)
        meal_items = meal_line_items(booking, nights)
        check_booking_totals(booking, room_item, meal_items)
        totals = invoice_total(room_item.line_total, meal_items, self.tax_rate_percent)

        return Invoice(
            invoice_number=f"INV-{booking.booking_id[-6:].upper()}",
            booking_id=booking.booking_id,
            user_email=booking.user_email,
            room_name=booking.room_name,
            checkin=booking.start_date,
            checkout=booking.end_date,
            nights=nights,
            price_per_night=booking.price_per_night,
            room_charges=room_item,
            meal_items=meal_items,
            totals=totals,
            currency=booking.currency,
            payment_provider=booking.payment_provider,
            payment_id=booking.payment_id,
        )
