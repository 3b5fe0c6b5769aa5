"""Cancellation refund policy.

The refund a guest is entitled to depends only on how many calendar days are
left before check-in. Thresholds live in a tier table so the policy can be
swapped through configuration::

    days_until_checkin -> refund_percent_for_days -> compute_refund
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from villa.models.refunds import RefundQuote, RefundSplit, RefundTier
from villa.utils.custom_exceptions import InvalidRefundPolicy
from villa.utils.datetime_normaliser import DateLike, calendar_day, local_tz
from villa.utils.money import percent_of, require_amount, require_percent

logger = logging.getLogger(__name__)

# admin cancel dialog and the customer cancel flow
STANDARD_TIERS: Tuple[RefundTier, ...] = (
    RefundTier(min_days=14, percent=100),
    RefundTier(min_days=7, percent=50),
)

# refund & cancellation page shown to customers
PUBLISHED_TIERS: Tuple[RefundTier, ...] = (
    RefundTier(min_days=10, percent=100),
    RefundTier(min_days=5, percent=50),
)

REFUND_POLICIES = {
    "standard": STANDARD_TIERS,
    "published": PUBLISHED_TIERS,
}


def validate_tiers(tiers: Iterable[RefundTier]) -> Tuple[RefundTier, ...]:
    """Return ``tiers`` ordered highest ``min_days`` first.

    Raises ``InvalidPercent`` for a percent outside 0-100 and
    ``InvalidRefundPolicy`` when two tiers share a threshold or when cancelling
    earlier could ever refund less than cancelling later.
    """
    ordered = tuple(sorted(tiers, key=lambda t: t.min_days, reverse=True))
    for tier in ordered:
        require_percent(tier.percent, name=f"refund percent for {tier.min_days} days")

    for higher, lower in zip(ordered, ordered[1:]):
        if higher.min_days == lower.min_days:
            raise InvalidRefundPolicy(f"duplicate refund tier for {higher.min_days} days")
        if higher.percent < lower.percent:
            raise InvalidRefundPolicy(
                f"refund tiers are not monotonic: {higher.min_days} days -> "
                f"{higher.percent}% but {lower.min_days} days -> {lower.percent}%"
            )
    return ordered


def parse_tiers(raw: str) -> Tuple[RefundTier, ...]:
    """Parse ``"14:100,7:50"`` into a validated tier table."""
    tiers: List[RefundTier] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            days, percent = chunk.split(":")
            tiers.append(RefundTier(min_days=int(days), percent=int(percent)))
        except ValueError:
            raise InvalidRefundPolicy(f"malformed refund tier '{chunk}', expected DAYS:PERCENT")
    if not tiers:
        raise InvalidRefundPolicy("refund tier table is empty")
    return validate_tiers(tiers)


def load_tiers(policy_name: str, raw_tiers: Optional[str] = None) -> Tuple[RefundTier, ...]:
    if raw_tiers:
        return parse_tiers(raw_tiers)
    try:
        return validate_tiers(REFUND_POLICIES[policy_name.lower()])
    except KeyError:
        allowed = ", ".join(REFUND_POLICIES)
        raise InvalidRefundPolicy(f"unknown refund policy '{policy_name}'. Allowed: {allowed}")


def days_until_checkin(now: DateLike, checkin: DateLike) -> int:
    """Whole calendar days from ``now`` to ``checkin``, read in the time zone of ``now``.

    Zero on the check-in day itself and negative once check-in has passed.
    """
    tz = local_tz(now)
    return (calendar_day(checkin, tz) - calendar_day(now, tz)).days


def refund_percent_for_days(days: int, tiers: Sequence[RefundTier] = STANDARD_TIERS) -> int:
    for tier in sorted(tiers, key=lambda t: t.min_days, reverse=True):
        if days >= tier.min_days:
            return tier.percent
    return 0


def compute_refund(amount: int, percent: int) -> RefundSplit:
    require_amount(amount)
    require_percent(percent)
    refund_amount = percent_of(amount, percent)
    return RefundSplit(refund_amount=refund_amount, cancellation_fee=amount - refund_amount)


class RefundPolicy:
    def __init__(self, tiers: Sequence[RefundTier] = STANDARD_TIERS):
        self.tiers = validate_tiers(tiers)

    @classmethod
    def from_settings(cls, policy_name: str, raw_tiers: Optional[str] = None) -> "RefundPolicy":
        tiers = load_tiers(policy_name, raw_tiers)
        logger.info(
            "Refund policy loaded: %s",
            ", ".join(f"{t.min_days}d={t.percent}%" for t in tiers),
        )
        return cls(tiers)

    def quote(self, amount: int, checkin: DateLike, now: DateLike) -> RefundQuote:
        days = days_until_checkin(now, checkin)
        percent = refund_percent_for_days(days, self.tiers)
        split = compute_refund(amount, percent)
        return RefundQuote(
            amount=amount,
            days_before_checkin=days,
            refund_percent=percent,
            refund_amount=split.refund_amount,
            cancellation_fee=split.cancellation_fee,
        )

    def describe(self) -> List[str]:
        lines = []
        upper = None
        for tier in self.tiers:
            if upper is None:
                window = f"Cancel {tier.min_days} days or more before check-in"
            else:
                window = f"Cancel between {tier.min_days} to {upper - 1} days before check-in"
            lines.append(f"{window}: {tier.percent}% refund")
            upper = tier.min_days
        if upper is None:
            lines.append("No refund on cancellation")
        else:
            lines.append(f"Cancel less than {upper} days before check-in: 0% refund (no refund)")
        return lines
