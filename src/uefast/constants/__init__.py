"""Constant definitions shared across uefast modules."""
