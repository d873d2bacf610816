from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Plan(str, Enum):
    US = "US"
    EA = "EA"


@dataclass(frozen=True)
class PaymentMethod:
    name: str
    instruction: str


@dataclass(frozen=True)
class PlanInfo:
    id: Plan
    name: str
    price: int
    currency: str
    description: str
    payment_methods: tuple[PaymentMethod, ...]


PLANS: dict[Plan, PlanInfo] = {
    Plan.US: PlanInfo(
        id=Plan.US,
        name="US Plan",
        price=29,
        currency="USD",
        description="Best for freelancers & service businesses in the US",
        payment_methods=(
            PaymentMethod("PayPal", "Send to: payments@payping.app"),
            PaymentMethod("Zelle", "Send to: payments@payping.app"),
            PaymentMethod("CashApp", "Send to: $PayPingApp"),
            PaymentMethod("Venmo", "Send to: @PayPingApp"),
        ),
    ),
    Plan.EA: PlanInfo(
        id=Plan.EA,
        name="East Africa Plan",
        price=10,
        currency="USD",
        description="Built for WhatsApp-first businesses",
        payment_methods=(
            PaymentMethod("M-Pesa", "Paybill: 123456, Account: PayPing"),
            PaymentMethod("Airtel Money", "Send to: 0700123456"),
            PaymentMethod("Tigo Pesa", "Send to: 0700123456"),
        ),
    ),
}
