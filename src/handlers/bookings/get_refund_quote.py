from dataclasses import asdict
import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError

from villa.repository.booking_repo import BookingRepository
from villa.services.booking_service import BookingService
from villa.services.refund_policy import RefundPolicy
from villa.utils.constants import AWS_REGION, REFUND_POLICY, REFUND_TIERS
from villa.utils.custom_exceptions import CalculationError, NotFoundException
from villa.utils.custom_response import send_custom_response
from villa.utils.request_context import Unauthorized, get_caller, get_path_param

logger = logging.getLogger()
logger.setLevel(logging.INFO)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
refund_policy = RefundPolicy.from_settings(REFUND_POLICY, REFUND_TIERS)
booking_service = BookingService(booking_repo=booking_repo, refund_policy=refund_policy)


def get_refund_quote(event, context):
    try:
        user_id, role = get_caller(event)
    except Unauthorized as err:
        return send_custom_response(401, str(err))

    booking_id = get_path_param(event, "booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    try:
        quote = booking_service.get_refund_quote(booking_id, user_id, role)
        return send_custom_response(
            200,
            "Refund quote calculated",
            {
                "booking_id": booking_id,
                "quote": asdict(quote),
                "policy": refund_policy.describe(),
            },
        )
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except CalculationError as err:
        logger.error(f"Refund quote for {booking_id} failed: {err}")
        return send_custom_response(422, "Failed to compute refund, contact support")
    except ClientError as err:
        logger.error(f"AWS client error: {err}")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error")
        return send_custom_response(500, "Internal server error")
