"""
secp256k1 suite: SHA-256, SEC 1 points, RFC 6979 nonces.

Group operations run in libsecp256k1 through ``coincurve`` (see
``curve.Secp256k1Curve``).
"""

from __future__ import annotations

import hashlib

from ..codec import Sec1Codec
from ..curve import Point
from ..curves import SECP256K1
from ..hash import nonce_rfc_6979
from ..pedersen import PedersenSuite


class Secp256k1Sha256Tai(PedersenSuite):
    NAME = "Secp256k1_SHA-256_TAI"
    SUITE_ID = b"Secp256k1_SHA-256_TAI"
    CHALLENGE_LEN = 16

    curve = SECP256K1
    hasher = hashlib.sha256
    codec_class = Sec1Codec

    def nonce(self, sk: int, input_point: Point) -> int:
        return nonce_rfc_6979(self, sk, input_point)


SECP256K1_SHA256_TAI = Secp256k1Sha256Tai()
