"""
Cipher suite: the (curve, hash, codec) triple every scheme is built on.

A suite is a configuration object.  Subclasses set the class attributes
and override only the algorithms they need; everything else falls back
to the RFC 9381 defaults implemented in ``hash.py``:

=================  ====================================================
``nonce``          RFC 8032 §5.1.6 (override with RFC 6979 for SEC1)
``challenge``      RFC 9381 §5.4.3 with trailing additional data
``data_to_point``  try-and-increment, RFC 9381 §5.4.1.1
``point_to_hash``  RFC 9381 §5.2 step 5, no cofactor clearing
``generator``      the curve's generator
=================  ====================================================

Concrete suites are instantiated once (see ``ecvrf.suites``) and the
instance is passed wherever a suite is required.
"""

from __future__ import annotations

import hashlib
from typing import Callable, ClassVar, Optional, Sequence, Type

from . import hash as h
from .codec import ArkworksCodec, Codec
from .curve import Curve, Point
from .field import PrimeField


class Suite:
    """Base cipher suite with RFC 9381 default algorithms."""

    NAME: ClassVar[str] = ""
    SUITE_ID: ClassVar[bytes] = b""
    CHALLENGE_LEN: ClassVar[int] = 32

    curve: ClassVar[Curve]
    hasher: ClassVar[Callable[..., "hashlib._Hash"]] = hashlib.sha512
    codec_class: ClassVar[Type[Codec]] = ArkworksCodec

    def __init__(self) -> None:
        digest_size = self.hasher().digest_size
        if not 0 < self.CHALLENGE_LEN <= digest_size:
            raise ValueError(
                f"{self.NAME}: challenge length {self.CHALLENGE_LEN} does not "
                f"fit a {digest_size}-byte hash"
            )
        self.codec: Codec = self.codec_class(self.curve)

    # ── sizes / shortcuts ───────────────────────────────────────────────
    @property
    def scalar_field(self) -> PrimeField:
        return self.curve.scalar_field

    @property
    def order(self) -> int:
        return self.curve.order

    @property
    def POINT_ENCODED_LEN(self) -> int:
        return self.codec.POINT_ENCODED_LEN

    @property
    def SCALAR_ENCODED_LEN(self) -> int:
        return self.codec.SCALAR_ENCODED_LEN

    def point_encode(self, pt: Point) -> bytes:
        return self.codec.point_encode(pt)

    def point_decode(self, buf: bytes, checked: bool = True) -> Point:
        return self.codec.point_decode(buf, checked)

    def scalar_encode(self, k: int) -> bytes:
        return self.codec.scalar_encode(k)

    def scalar_decode(self, buf: bytes, checked: bool = True) -> int:
        return self.codec.scalar_decode(buf, checked)

    def hash(self, data: bytes) -> bytes:
        return self.hasher(data).digest()

    # ── overridable algorithms ──────────────────────────────────────────
    def generator(self) -> Point:
        return self.curve.generator

    def nonce(self, sk: int, input_point: Point) -> int:
        return h.nonce_rfc_8032(self, sk, input_point)

    def challenge(self, points: Sequence[Point], ad: bytes = b"") -> int:
        return h.challenge_rfc_9381(self, points, ad)

    def data_to_point(self, data: bytes) -> Optional[Point]:
        """
        Hash *data* to a prime-subgroup point, or ``None`` on failure.

        *data* is ``[salt ‖] alpha``; no salt is prepended here.
        """
        return h.hash_to_curve_tai_rfc_9381(self, data)

    def point_to_hash(self, pt: Point) -> bytes:
        return h.point_to_hash_rfc_9381(self, pt, mul_by_cofactor=False)

    def check(self, *points: Point) -> None:
        """Raise ``ValueError`` if any point belongs to another curve."""
        for pt in points:
            if pt.curve is not self.curve:
                raise ValueError(
                    f"point on {pt.curve.name} used with suite {self.NAME}"
                )

    def __repr__(self) -> str:
        return f"<Suite {self.NAME}>"
