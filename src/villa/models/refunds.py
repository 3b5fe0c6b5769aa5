from dataclasses import dataclass


@dataclass(frozen=True)
class RefundTier:
    min_days: int
    percent: int


@dataclass(frozen=True)
class RefundSplit:
    refund_amount: int
    cancellation_fee: int


@dataclass(frozen=True)
class RefundQuote:
    amount: int
    days_before_checkin: int
    refund_percent: int
    refund_amount: int
    cancellation_fee: int
