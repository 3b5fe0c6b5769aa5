from botocore.exceptions import ClientError
import logging
from typing import Optional
from villa.models.bookings import Booking, BookingStatus, MealPrices
from villa.models.refunds import RefundQuote
from villa.utils.custom_exceptions import BookingStateConflict
from villa.utils.datetime_normaliser import from_iso_date, from_iso_string
from decimal import Decimal
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


def _int_or_none(value) -> Optional[int]:
    if value is None:
        return None
    return int(value)


class BookingRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _iso(dt: datetime | str) -> str:
        if isinstance(dt, str):
            parsed = datetime.fromisoformat(dt)
        else:
            parsed = dt

        if parsed.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")

        return parsed.astimezone(timezone.utc).isoformat()

    @staticmethod
    def _to_domain(booking_id: str, item: dict) -> Booking:
        meal_meta = item.get("meal_meta") or {}
        cancelled_at = item.get("cancelled_at")
        return Booking(
            booking_id=booking_id,
            user_id=item["user_id"],
            user_email=item.get("user_email"),
            room_name=item.get("room_name", ""),
            start_date=from_iso_date(item["check_in"]),
            end_date=from_iso_date(item["check_out"]),
            amount=int(item["amount"]),
            status=BookingStatus(item["booking_status"]),
            price_per_night=int(item.get("price_per_night", 0)),
            room_total=_int_or_none(item.get("room_total")),
            meal_total=_int_or_none(item.get("meal_total")),
            veg_guests=int(item.get("veg_guests", 0)),
            non_veg_guests=int(item.get("non_veg_guests", 0)),
            combo_guests=int(item.get("combo_guests", 0)),
            meal_prices=MealPrices(
                veg=_int_or_none(meal_meta.get("veg_price")),
                non_veg=_int_or_none(meal_meta.get("non_veg_price")),
                combo=_int_or_none(meal_meta.get("combo_price")),
            ),
            currency=item.get("currency", "INR"),
            payment_provider=item.get("payment_provider"),
            payment_id=item.get("payment_id"),
            order_id=item.get("order_id"),
            refund_percent=_int_or_none(item.get("refund_percent")),
            refund_amount=_int_or_none(item.get("refund_amount")),
            cancellation_fee=_int_or_none(item.get("cancellation_fee")),
            cancellation_reason=item.get("cancellation_reason"),
            cancelled_at=from_iso_string(cancelled_at) if cancelled_at else None,
            booked_at=from_iso_string(item["booked_at"]),
        )

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None

        return self._to_domain(booking_id, item)

    def cancel_booking(
        self,
        booking: Booking,
        quote: RefundQuote,
        reason: str,
        cancelled_at: datetime,
    ):
        update = {
            "UpdateExpression": (
                "SET #booking_status = :cancelled, refund_percent = :percent, "
                "refund_amount = :refund, cancellation_fee = :fee, "
                "cancellation_reason = :reason, cancelled_at = :cancelled_at"
            ),
            "ExpressionAttributeNames": {
                "#booking_status": "booking_status",
            },
            "ExpressionAttributeValues": {
                ":cancelled": BookingStatus.CANCELLED.value,
                ":expected": booking.status.value,
                ":percent": Decimal(quote.refund_percent),
                ":refund": Decimal(quote.refund_amount),
                ":fee": Decimal(quote.cancellation_fee),
                ":reason": reason,
                ":cancelled_at": self._iso(cancelled_at),
            },
            "ConditionExpression": "attribute_exists(pk) AND #booking_status = :expected",
        }

        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Update": {
                            "Key": {
                                "pk": f"BOOKING#{booking.booking_id}",
                                "sk": "DETAILS",
                            },
                            "TableName": self.table.name,
                            **update,
                        }
                    },
                    {
                        "Update": {
                            "Key": {
                                "pk": f"USER#{booking.user_id}",
                                "sk": f"BOOKING#{booking.booking_id}",
                            },
                            "TableName": self.table.name,
                            **update,
                        }
                    },
                ]
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise BookingStateConflict(
                    f"booking {booking.booking_id} is no longer {booking.status.value}"
                )
            logger.error(f"Error cancelling booking {booking.booking_id}: {err}")
            raise
