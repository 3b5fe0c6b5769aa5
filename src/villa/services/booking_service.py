import logging
from datetime import datetime
from typing import Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from villa.models.bookings import Booking
from villa.models.refunds import RefundQuote
from villa.models.users import UserRole
from villa.repository.booking_repo import BookingRepository
from villa.services.mail_service import MailService
from villa.services.refund_policy import RefundPolicy, days_until_checkin
from villa.utils.custom_exceptions import CancellationNotAllowed, NotFoundException

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        refund_policy: RefundPolicy,
        mail_service: Optional[MailService] = None,
    ):
        self.booking_repo = booking_repo
        self.refund_policy = refund_policy
        self.mail_service = mail_service

    def get_booking(self, booking_id: str, user_id: str, role: UserRole) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        # customers only see their own bookings; anything else looks missing
        if booking is None or (role != UserRole.ADMIN and booking.user_id != user_id):
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def get_refund_quote(
        self, booking_id: str, user_id: str, role: UserRole, now: Optional[datetime] = None
    ) -> RefundQuote:
        booking = self.get_booking(booking_id, user_id, role)
        if booking.is_cancelled:
            return self._stored_quote(booking, now)
        return self.refund_policy.quote(booking.amount, booking.start_date, now or self._now())

    def cancel_booking(
        self,
        booking_id: str,
        user_id: str,
        role: UserRole,
        reason: str,
        now: Optional[datetime] = None,
    ) -> Tuple[Booking, RefundQuote]:
        now = now or self._now()
        booking = self.get_booking(booking_id, user_id, role)

        if booking.is_cancelled:
            logger.info(f"Booking {booking_id} already cancelled")
            return booking, self._stored_quote(booking, now)

        quote = self.refund_policy.quote(booking.amount, booking.start_date, now)
        if role != UserRole.ADMIN and quote.days_before_checkin <= 0:
            raise CancellationNotAllowed("Stay already started; cannot cancel")

        self.booking_repo.cancel_booking(booking, quote, reason, cancelled_at=now)
        logger.info(
            f"Cancelled booking {booking_id}: refund {quote.refund_percent}% "
            f"({quote.refund_amount} of {quote.amount})"
        )

        cancelled = self.booking_repo.get_booking_by_id(booking_id) or booking
        if self.mail_service and cancelled.user_email:
            try:
                self.mail_service.send_cancellation_notice(cancelled, quote)
            except (ClientError, BotoCoreError) as err:
                logger.error(f"Cancellation mail for booking {booking_id} failed: {err}")
        return cancelled, quote

    def _stored_quote(self, booking: Booking, now: Optional[datetime]) -> RefundQuote:
        refund_amount = booking.refund_amount or 0
        return RefundQuote(
            amount=booking.amount,
            days_before_checkin=days_until_checkin(
                booking.cancelled_at or now or self._now(), booking.start_date
            ),
            refund_percent=booking.refund_percent or 0,
            refund_amount=refund_amount,
            cancellation_fee=booking.amount - refund_amount,
        )

    @staticmethod
    def _now() -> datetime:
        return datetime.now().astimezone()
