"""Baby-JubJub suite: SHA-512, arkworks codec, try-and-increment.  Ring capable."""

from __future__ import annotations

from ..curves import BABY_JUBJUB
from ..kzg import BN254
from ..ring import RingSuite


class BabyJubJubSha512Tai(RingSuite):
    NAME = "BabyJubJub_SHA-512_TAI"
    SUITE_ID = b"BabyJubJub_SHA-512_TAI"
    CHALLENGE_LEN = 32

    curve = BABY_JUBJUB
    PAIRING = BN254


BABY_JUBJUB_SHA512_TAI = BabyJubJubSha512Tai()
