"""
NIST P-256 suite: ECVRF-P256-SHA256-TAI.

Suite string ``0x01``, SHA-256, SEC 1 compressed points, big-endian
scalars, RFC 6979 nonces and a 16-byte challenge, so IETF proofs match
the RFC 9381 test vectors (with empty additional data).

References
----------
- RFC 9381 §5.5, Appendix B.1 (test vectors).
"""

from __future__ import annotations

import hashlib

from ..codec import Sec1Codec
from ..curve import Point
from ..curves import SECP256R1
from ..hash import nonce_rfc_6979
from ..pedersen import PedersenSuite


class P256Sha256Tai(PedersenSuite):
    NAME = "P256_SHA-256_TAI"
    SUITE_ID = b"\x01"
    CHALLENGE_LEN = 16

    curve = SECP256R1
    hasher = hashlib.sha256
    codec_class = Sec1Codec

    def nonce(self, sk: int, input_point: Point) -> int:
        return nonce_rfc_6979(self, sk, input_point)


P256_SHA256_TAI = P256Sha256Tai()
