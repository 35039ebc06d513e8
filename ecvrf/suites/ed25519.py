"""
Ed25519 suite after RFC 9381 §5.5 (ECVRF-EDWARDS25519-SHA512-TAI), with
the arkworks little-endian codec and a 16-byte challenge.
"""

from __future__ import annotations

from ..curves import ED25519
from ..pedersen import PedersenSuite


class Ed25519Sha512Tai(PedersenSuite):
    NAME = "Ed25519_SHA-512_TAI"
    SUITE_ID = b"Ed25519_SHA-512_TAI"
    CHALLENGE_LEN = 16

    curve = ED25519


ED25519_SHA512_TAI = Ed25519Sha512Tai()
