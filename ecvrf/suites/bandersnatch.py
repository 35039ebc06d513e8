"""
Bandersnatch suites.

``Bandersnatch_SHA-512_ELL2``
    Twisted Edwards form, arkworks codec, Elligator 2 hash-to-curve
    (``Bandersnatch_XMD:SHA-512_ELL2_RO_``).  Ring capable.

``Bandersnatch_SW_SHA-512_TAI``
    The same group in short Weierstrass form, arkworks codec,
    try-and-increment hash-to-curve.  Pedersen capable.

References
----------
- Masson, Sanso, Zhang (2021). "Bandersnatch: a fast elliptic curve built
  over the BLS12-381 scalar field."  ePrint 2021/1152.
- RFC 9380 §6.8.2 (Elligator 2 for twisted Edwards curves).
"""

from __future__ import annotations

from typing import Optional

from ..curve import Point
from ..curves import BANDERSNATCH, BANDERSNATCH_SW
from ..kzg import BLS12_381
from ..hash import hash_to_curve_ell2_rfc_9380
from ..pedersen import PedersenSuite
from ..ring import RingSuite


class BandersnatchSha512Ell2(RingSuite):
    NAME = "Bandersnatch_SHA-512_ELL2"
    SUITE_ID = b"Bandersnatch_SHA-512_ELL2"
    CHALLENGE_LEN = 32
    H2C_SUITE_ID = b"Bandersnatch_XMD:SHA-512_ELL2_RO_"

    curve = BANDERSNATCH
    PAIRING = BLS12_381

    def data_to_point(self, data: bytes) -> Optional[Point]:
        return hash_to_curve_ell2_rfc_9380(self, data, self.H2C_SUITE_ID)


class BandersnatchSwSha512Tai(PedersenSuite):
    NAME = "Bandersnatch_SW_SHA-512_TAI"
    SUITE_ID = b"Bandersnatch_SW_SHA-512_TAI"
    CHALLENGE_LEN = 32

    curve = BANDERSNATCH_SW


BANDERSNATCH_SHA512_ELL2 = BandersnatchSha512Ell2()
BANDERSNATCH_SW_SHA512_TAI = BandersnatchSwSha512Tai()
