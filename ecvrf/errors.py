"""
Error types raised by the VRF schemes.

Two kinds of failure are distinguished:

- ``VerificationFailure``: a cryptographic check did not hold.  It never
  says *which* equation (or which batch item) failed.
- ``InvalidData``: a byte string or parameter set could not be turned
  into a well-formed object (wrong length, point off the curve, setup too
  small for the requested ring, ...).
"""

from __future__ import annotations


class Error(Exception):
    """Base class for every error raised by ``ecvrf``."""


class VerificationFailure(Error):
    """A proof, or a batch of proofs, was rejected."""

    def __init__(self, message: str = "verification failure") -> None:
        super().__init__(message)


class InvalidData(Error, ValueError):
    """Malformed, undersized or out-of-range input data."""

    def __init__(self, message: str = "invalid data") -> None:
        super().__init__(message)


class RingCapacityError(InvalidData):
    """
    Ring verifier-key builder refused an append.

    ``available`` holds the number of free slots left in the builder, or
    ``sys.maxsize`` when the setup segment required by the append could
    not be looked up.
    """

    def __init__(self, available: int, message: str = "") -> None:
        super().__init__(
            message or f"ring builder append rejected (available={available})"
        )
        self.available = available
