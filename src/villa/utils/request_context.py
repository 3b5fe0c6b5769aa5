from typing import Tuple

from villa.models.users import UserRole


class Unauthorized(Exception):
    pass


def get_caller(event: dict) -> Tuple[str, UserRole]:
    """Read the caller placed in the request context by the API Gateway authorizer."""
    try:
        authorizer = event["requestContext"]["authorizer"]
        user_id = authorizer["user_id"]
    except (KeyError, TypeError):
        raise Unauthorized("Unauthorized")

    role_raw = authorizer.get("role") or UserRole.CUSTOMER.value
    try:
        role = UserRole(role_raw.upper())
    except ValueError:
        role = UserRole.CUSTOMER
    return user_id, role


def get_path_param(event: dict, name: str):
    path_params = event.get("pathParameters") or {}
    return path_params.get(name)
