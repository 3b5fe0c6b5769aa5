import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import boto3

from villa.models.bookings import Booking
from villa.models.invoice import Invoice
from villa.models.refunds import RefundQuote
from villa.utils.constants import AWS_REGION, MAIL_SENDER
from villa.utils.money import format_money

logger = logging.getLogger(__name__)


class MailService:
    def __init__(self, sender: str = MAIL_SENDER, region: str = AWS_REGION, ses_client=None):
        self.sender = sender
        self.ses = ses_client if ses_client else boto3.client("ses", region_name=region)

    def _send(self, recipient: str, subject: str, body: str):
        msg = MIMEMultipart()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain"))

        self.ses.send_raw_email(
            Source=self.sender,
            Destinations=[recipient],
            RawMessage={"Data": msg.as_string()},
        )
        logger.info(f"Sent '{subject}' to {recipient}")

    def send_invoice(self, invoice: Invoice):
        rows = "\n".join(
            f"            {item.label}: {format_money(item.unit_price)} x {item.quantity}"
            f" = {format_money(item.line_total)}"
            for item in invoice.line_items
        )
        body = f"""
            Hello,

            Here is your booking invoice:

            Invoice No: {invoice.invoice_number}
            Booking ID: {invoice.booking_id}
            Room: {invoice.room_name}

            Check-in: {invoice.checkin:%d %b %Y}
            Check-out: {invoice.checkout:%d %b %Y}
            Nights: {invoice.nights}

{rows}

            Sub Total: {format_money(invoice.totals.sub_total)}
            Tax {invoice.totals.tax_rate_percent}%: {format_money(invoice.totals.tax)}
            Grand Total: {format_money(invoice.totals.grand_total)}

            Thank you for staying with us.
            """
        self._send(invoice.user_email, f"Invoice {invoice.invoice_number}", body)

    def send_cancellation_notice(self, booking: Booking, quote: RefundQuote):
        body = f"""
            Hello,

            Your booking {booking.booking_id} for {booking.room_name}
            ({booking.start_date:%d %b %Y} to {booking.end_date:%d %b %Y}) has been cancelled.

            Amount paid: {format_money(quote.amount)}
            Refund ({quote.refund_percent}%): {format_money(quote.refund_amount)}
            Cancellation fee: {format_money(quote.cancellation_fee)}

            Refunds are processed within 8 to 10 working days.
            """
        self._send(booking.user_email, f"Booking {booking.booking_id} cancelled", body)
