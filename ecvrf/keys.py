"""
Key and point wrappers bound to a cipher suite.

- ``Secret``  secret scalar x with its cached public key.
- ``Public``  Y = x·G.
- ``Input``   VRF input point H, usually ``suite.data_to_point(alpha)``.
- ``Output``  VRF output point Γ = x·H; ``Output.hash()`` is the
  pseudorandom output β.

All four carry the suite they belong to, and operations refuse to mix
values from different suites.
"""

from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from typing import Optional

from .curve import Point
from .field import RandomSource
from .suite import Suite


def check_suite(suite: Suite, *values) -> None:
    """Raise ``ValueError`` unless every wrapper belongs to *suite*."""
    for v in values:
        if v.suite is not suite:
            raise ValueError(
                f"{type(v).__name__} of suite {v.suite.NAME} "
                f"used with suite {suite.NAME}"
            )


# ── public values ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class _PointValue:
    suite: Suite
    point: Point

    def __post_init__(self) -> None:
        self.suite.check(self.point)

    def to_bytes(self) -> bytes:
        return self.suite.point_encode(self.point)

    @classmethod
    def from_bytes(cls, suite: Suite, data: bytes):
        """Decode with curve and subgroup validation (``InvalidData`` on failure)."""
        return cls(suite, suite.point_decode(data, checked=True))


class Public(_PointValue):
    """Public key  Y = x·G."""


class Input(_PointValue):
    """VRF input point."""

    @classmethod
    def new(cls, suite: Suite, data: bytes) -> Optional[Input]:
        """Hash *data* to a curve point; ``None`` if hash-to-curve fails."""
        pt = suite.data_to_point(data)
        return None if pt is None else cls(suite, pt)


class Output(_PointValue):
    """VRF output point  Γ = x·H."""

    def hash(self) -> bytes:
        """Pseudorandom VRF output  β = point_to_hash(Γ)."""
        return self.suite.point_to_hash(self.point)


# ── Secret ──────────────────────────────────────────────────────────────
class Secret:
    """
    Secret VRF key.

    The scalar is overwritten by ``zeroize()``, on leaving a ``with``
    block and when the object is garbage collected.  Python integers are
    immutable, so this drops the reference held here but cannot scrub
    copies made elsewhere (best-effort in Python).

    Example
    -------
    ::

        with Secret.from_seed(suite, b"seed") as sk:
            out = sk.output(Input.new(suite, b"input"))
    """

    __slots__ = ("suite", "_scalar", "_public")

    def __init__(self, suite: Suite, scalar: int) -> None:
        self.suite = suite
        self._scalar = scalar % suite.order
        self._public = Public(suite, suite.curve.mul(suite.generator(), self._scalar))

    # construction -----------------------------------------------------------
    @classmethod
    def from_scalar(cls, suite: Suite, scalar: int) -> Secret:
        return cls(suite, scalar)

    @classmethod
    def from_seed(cls, suite: Suite, seed: bytes) -> Secret:
        """
        Derive the scalar as  Hash(seed)  read little endian, reduced mod q.

        A zero result is replaced by one.
        """
        scalar = suite.scalar_field.from_le_bytes_mod_order(suite.hash(seed))
        return cls(suite, scalar or 1)

    @classmethod
    def from_rand(cls, suite: Suite, rng: Optional[RandomSource] = None) -> Secret:
        """Ephemeral secret from 32 random bytes (OS CSPRNG by default)."""
        fill = rng or secrets.token_bytes
        return cls.from_seed(suite, fill(32))

    # accessors --------------------------------------------------------------
    @property
    def scalar(self) -> int:
        if self._scalar is None:
            raise ValueError("secret has been zeroized")
        return self._scalar

    def public(self) -> Public:
        return self._public

    def output(self, input: Input) -> Output:
        """Γ = x·H."""
        check_suite(self.suite, input)
        return Output(self.suite, self.suite.curve.mul(input.point, self.scalar))

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self.suite.scalar_encode(self.scalar)

    @classmethod
    def from_bytes(cls, suite: Suite, data: bytes) -> Secret:
        return cls(suite, suite.scalar_decode(data, checked=True))

    # zeroization ------------------------------------------------------------
    def zeroize(self) -> None:
        """Overwrite the secret scalar (best-effort in Python)."""
        self._scalar = None

    def __enter__(self) -> Secret:
        return self

    def __exit__(self, *exc) -> None:
        self.zeroize()

    def __del__(self) -> None:
        self._scalar = None

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Secret) or o.suite is not self.suite:
            return False
        return hmac.compare_digest(self.to_bytes(), o.to_bytes())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "zeroized" if self._scalar is None else "…"
        return f"Secret({self.suite.NAME}, {state})"
