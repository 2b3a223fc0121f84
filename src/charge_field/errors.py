# MIT License (see LICENSE)
"""
Exception types raised at the boundaries of the simulation core.

The numerical code never raises: near-singular field queries are handled by
softening, and bad tunables are rejected before they reach the kernels.
"""
from __future__ import annotations


class ChargeFieldError(Exception):
    """Base class for all errors raised by charge_field."""


class InvalidReference(ChargeFieldError, KeyError):
    """An operation addressed a charge id that is not in the store."""

    def __init__(self, charge_id: int):
        super().__init__(charge_id)
        self.charge_id = charge_id

    def __str__(self) -> str:
        return f"No charge with id {self.charge_id}"


class InvalidConfiguration(ChargeFieldError, ValueError):
    """A tunable (decay exponent, lattice bound, ...) is out of range."""
