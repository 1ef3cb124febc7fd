"""Countdown timer service: admin API, storefront host and countdown logic."""

__version__ = "1.0.0"
