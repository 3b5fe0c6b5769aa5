import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError

from villa.models.users import UserRole
from villa.repository.booking_repo import BookingRepository
from villa.services.invoice_service import InvoiceService
from villa.services.mail_service import MailService
from villa.utils.constants import AWS_REGION
from villa.utils.custom_exceptions import CalculationError, NotFoundException
from villa.utils.custom_response import send_custom_response
from villa.utils.request_context import Unauthorized, get_caller, get_path_param

logger = logging.getLogger()
logger.setLevel(logging.INFO)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
invoice_service = InvoiceService(booking_repo, MailService(region=AWS_REGION))


def get_invoice(event, context):
    try:
        user_id, role = get_caller(event)
    except Unauthorized as err:
        return send_custom_response(401, str(err))

    booking_id = get_path_param(event, "booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    params = event.get("queryStringParameters") or {}
    send = str(params.get("send", "")).lower() == "true"

    try:
        owner_id = None if role == UserRole.ADMIN else user_id
        if send:
            invoice = invoice_service.send_invoice(booking_id, owner_id)
        else:
            invoice = invoice_service.generate_invoice(booking_id, owner_id)
        return send_custom_response(200, "Invoice generated", invoice)

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except CalculationError as err:
        logger.error(f"Invoice for {booking_id} failed: {err}")
        return send_custom_response(422, "Failed to compute invoice, contact support")
    except ClientError as err:
        logger.error(f"AWS client error: {err}")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception("Unhandled error")
        return send_custom_response(500, "Internal server error")
