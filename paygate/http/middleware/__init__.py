"""Framework middleware for the payment gate."""

from .fastapi import payment_middleware

__all__ = ["payment_middleware"]
