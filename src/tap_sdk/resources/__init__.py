"""Typed Tap API resources."""

from .authorize import Authorize
from .card import Card
from .charge import Charge
from .customer import Customer
from .refund import Refund
from .token import Token

__all__ = [
    "Authorize",
    "Card",
    "Charge",
    "Customer",
    "Refund",
    "Token",
]
