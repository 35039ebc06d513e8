"""
Point and scalar wire formats.

Two interchangeable codecs are provided:

``ArkworksCodec``
    Little-endian.  A compressed point is one coordinate plus flag bits
    packed into the most significant bits of the last byte:

    - twisted Edwards: the *y* coordinate, 1 flag bit (bit 7) set when *x*
      is "negative" (x > −x as integers in [0, p));
    - short Weierstrass: the *x* coordinate, 2 flag bits, bit 7 set when
      *y* is negative, bit 6 set for the point at infinity.

    Length is ⌈(field_bits + flag_bits) / 8⌉.

``Sec1Codec``
    Big-endian, SEC 1 v2 §2.3.3 compressed form: ``0x02``/``0x03`` (parity
    of *y*) followed by *x*; the identity encodes as the single byte
    ``0x00``.  Twisted Edwards curves go through their short-Weierstrass
    companion (see ``curve.TwistedEdwardsCurve.to_sw``).

Scalars are fixed-length integers in the codec's byte order.  Scalar
decoding reduces modulo the group order and accepts any length, because
challenges and hash outputs are decoded through the same routine; pass
``checked=True`` to require a canonical, exact-length encoding.

References
----------
- SEC 1 v2 (2009) §2.3.3 / §2.3.4  Elliptic-Curve-Point-to-Octet-String
- arkworks ``ark-serialize`` compressed encoding with flags
"""

from __future__ import annotations

import enum
from typing import Optional

from .curve import Curve, CurveForm, Point
from .errors import InvalidData


class Endianness(enum.Enum):
    LITTLE = "little"
    BIG = "big"


class Codec:
    """Wire format bound to a single curve."""

    ENDIANNESS: Endianness

    def __init__(self, curve: Curve) -> None:
        self.curve = curve
        self.SCALAR_ENCODED_LEN = curve.scalar_field.byte_len
        self.POINT_ENCODED_LEN = self._point_len(curve)

    @property
    def BIG_ENDIAN(self) -> bool:
        return self.ENDIANNESS is Endianness.BIG

    # points -----------------------------------------------------------------
    def _point_len(self, curve: Curve) -> int:
        raise NotImplementedError

    def point_encode(self, pt: Point) -> bytes:
        raise NotImplementedError

    def _point_decode(self, buf: bytes) -> Point:
        raise NotImplementedError

    def point_decode(self, buf: bytes, checked: bool = False) -> Point:
        """
        Decode a point.

        The result always satisfies the curve equation.  With
        ``checked=True`` it must also lie in the prime-order subgroup.

        Raises
        ------
        InvalidData
            Wrong length, non-canonical coordinate, no point with the
            given coordinate, or (checked) point outside the subgroup.
        """
        pt = self._point_decode(bytes(buf))
        if checked and not self.curve.is_in_prime_subgroup(pt):
            raise InvalidData("point not in the prime-order subgroup")
        return pt

    def candidate_len(self) -> int:
        """Number of hash bytes try-and-increment feeds to ``candidate_point``."""
        return self.POINT_ENCODED_LEN

    def candidate_point(self, buf: bytes) -> Optional[Point]:
        """
        Interpret a hash output as a point, or ``None``.

        Only try-and-increment hash-to-curve calls this.  The result is
        on the curve but not necessarily in the prime subgroup.
        """
        n = self.candidate_len()
        if len(buf) < n:
            return None
        try:
            return self._candidate_decode(bytes(buf[:n]))
        except InvalidData:
            return None

    def _candidate_decode(self, buf: bytes) -> Point:
        return self._point_decode(buf)

    # scalars ----------------------------------------------------------------
    def scalar_encode(self, k: int) -> bytes:
        return (k % self.curve.order).to_bytes(
            self.SCALAR_ENCODED_LEN, self.ENDIANNESS.value
        )

    def scalar_decode(self, buf: bytes, checked: bool = False) -> int:
        """
        Decode a scalar, reducing modulo the group order.

        With ``checked=True`` the buffer must be exactly
        ``SCALAR_ENCODED_LEN`` bytes and already reduced.
        """
        v = int.from_bytes(buf, self.ENDIANNESS.value)
        if checked:
            if len(buf) != self.SCALAR_ENCODED_LEN:
                raise InvalidData(
                    f"need {self.SCALAR_ENCODED_LEN} scalar bytes, got {len(buf)}"
                )
            if v >= self.curve.order:
                raise InvalidData("scalar out of range")
        return v % self.curve.order

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.curve.name})"


# ── native (arkworks) ───────────────────────────────────────────────────
class ArkworksCodec(Codec):
    """Little endian, flags in the most significant bits of the last byte."""

    ENDIANNESS = Endianness.LITTLE

    _Y_NEGATIVE = 0x80          # short Weierstrass
    _INFINITY = 0x40            # short Weierstrass
    _X_NEGATIVE = 0x80          # twisted Edwards

    def _point_len(self, curve: Curve) -> int:
        return (curve.base_field.bits + curve.FLAG_BITS + 7) // 8

    @staticmethod
    def _is_negative(v: int, p: int) -> bool:
        return v > p - v

    def point_encode(self, pt: Point) -> bytes:
        curve = self.curve
        p = curve.base_field.modulus
        n = self.POINT_ENCODED_LEN
        if curve.form is CurveForm.TWISTED_EDWARDS:
            buf = bytearray(pt.y.to_bytes(n, "little"))
            if self._is_negative(pt.x, p):
                buf[-1] |= self._X_NEGATIVE
            return bytes(buf)
        if pt.is_identity():
            buf = bytearray(n)
            buf[-1] |= self._INFINITY
            return bytes(buf)
        buf = bytearray(pt.x.to_bytes(n, "little"))
        if self._is_negative(pt.y, p):
            buf[-1] |= self._Y_NEGATIVE
        return bytes(buf)

    def _point_decode(self, buf: bytes) -> Point:
        curve = self.curve
        n = self.POINT_ENCODED_LEN
        if len(buf) != n:
            raise InvalidData(f"need {n} point bytes, got {len(buf)}")
        p = curve.base_field.modulus
        raw = bytearray(buf)
        flags = raw[-1] & 0xC0
        if curve.form is CurveForm.TWISTED_EDWARDS:
            raw[-1] &= 0x7F
            y = int.from_bytes(raw, "little")
            if y >= p:
                raise InvalidData("non-canonical field element")
            x = curve.recover_x(y)
            if x is None:
                raise InvalidData("no curve point with this y coordinate")
            if self._is_negative(x, p) != bool(flags & self._X_NEGATIVE):
                x = (-x) % p
            return Point(curve, x, y)

        raw[-1] &= 0x3F
        v = int.from_bytes(raw, "little")
        if flags & self._INFINITY:
            if flags & self._Y_NEGATIVE or v != 0:
                raise InvalidData("malformed point at infinity")
            return curve.identity()
        if v >= p:
            raise InvalidData("non-canonical field element")
        y = curve.recover_y(v)
        if y is None:
            raise InvalidData("no curve point with this x coordinate")
        if self._is_negative(y, p) != bool(flags & self._Y_NEGATIVE):
            y = (-y) % p
        return Point(curve, v, y)

    def candidate_len(self) -> int:
        if self.curve.form is CurveForm.SHORT_WEIERSTRASS:
            return self.curve.base_field.byte_len
        return self.POINT_ENCODED_LEN

    def _candidate_decode(self, buf: bytes) -> Point:
        if self.curve.form is not CurveForm.SHORT_WEIERSTRASS:
            return self._point_decode(buf)
        # x coordinate only, followed by a zero flag byte: finite, y positive
        raw = bytearray(buf.ljust(self.POINT_ENCODED_LEN, b"\x00"))
        raw[-1] &= 0x3F
        return self._point_decode(bytes(raw))


# ── SEC 1 ───────────────────────────────────────────────────────────────
class Sec1Codec(Codec):
    """Big endian, explicit leading parity byte."""

    ENDIANNESS = Endianness.BIG

    def _point_len(self, curve: Curve) -> int:
        return 1 + curve.base_field.byte_len

    def point_encode(self, pt: Point) -> bytes:
        if pt.is_identity():
            return b"\x00"
        sw = self._to_sw(pt)
        flag = 0x03 if sw.y & 1 else 0x02
        return bytes([flag]) + sw.x.to_bytes(self.POINT_ENCODED_LEN - 1, "big")

    def _point_decode(self, buf: bytes) -> Point:
        if buf == b"\x00":
            return self.curve.identity()
        n = self.POINT_ENCODED_LEN
        if len(buf) != n:
            raise InvalidData(f"need {n} point bytes, got {len(buf)}")
        if buf[0] not in (0x02, 0x03):
            raise InvalidData(f"bad SEC1 prefix 0x{buf[0]:02x}")
        return self._decode_x(buf[1:], buf[0] & 0x01)

    def candidate_len(self) -> int:
        return self.POINT_ENCODED_LEN - 1

    def _candidate_decode(self, buf: bytes) -> Point:
        # Hash outputs carry no parity byte: read them as even-y encodings.
        return self._decode_x(buf, 0)

    def _decode_x(self, x_bytes: bytes, odd: int) -> Point:
        sw_curve = self._sw_curve()
        x = int.from_bytes(x_bytes, "big")
        if x >= sw_curve.base_field.modulus:
            raise InvalidData("non-canonical field element")
        y = sw_curve.recover_y(x)
        if y is None:
            raise InvalidData("no curve point with this x coordinate")
        if (y & 1) != odd:
            y = (-y) % sw_curve.base_field.modulus
        sw = Point(sw_curve, x, y)
        if self.curve.form is CurveForm.TWISTED_EDWARDS:
            return self.curve.from_sw(sw)  # type: ignore[attr-defined]
        return sw

    def _sw_curve(self):
        if self.curve.form is CurveForm.TWISTED_EDWARDS:
            return self.curve.sw  # type: ignore[attr-defined]
        return self.curve

    def _to_sw(self, pt: Point) -> Point:
        if self.curve.form is CurveForm.TWISTED_EDWARDS:
            return self.curve.to_sw(pt)  # type: ignore[attr-defined]
        return pt
