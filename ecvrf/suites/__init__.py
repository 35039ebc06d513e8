"""
Bundled cipher suites and their name registry.

>>> from ecvrf import suites
>>> suites.get("bandersnatch_sha-512_ell2") is suites.BANDERSNATCH_SHA512_ELL2
True
"""

from __future__ import annotations

from typing import Dict, List

from ..suite import Suite
from .baby_jubjub import BABY_JUBJUB_SHA512_TAI, BabyJubJubSha512Tai
from .bandersnatch import (
    BANDERSNATCH_SHA512_ELL2,
    BANDERSNATCH_SW_SHA512_TAI,
    BandersnatchSha512Ell2,
    BandersnatchSwSha512Tai,
)
from .ed25519 import ED25519_SHA512_TAI, Ed25519Sha512Tai
from .secp256k1 import SECP256K1_SHA256_TAI, Secp256k1Sha256Tai
from .secp256r1 import P256_SHA256_TAI, P256Sha256Tai

_REGISTRY: Dict[str, Suite] = {}


def register(suite: Suite) -> Suite:
    """Make *suite* reachable through ``get``; names are case-insensitive."""
    key = suite.NAME.lower()
    if key in _REGISTRY and _REGISTRY[key] is not suite:
        raise ValueError(f"suite name {suite.NAME!r} already registered")
    _REGISTRY[key] = suite
    return suite


def get(name: str) -> Suite:
    """Look a suite up by name; raises ``KeyError`` for unknown names."""
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise KeyError(f"unknown suite {name!r}") from None


def names() -> List[str]:
    return [s.NAME for s in _REGISTRY.values()]


for _suite in (
    BANDERSNATCH_SHA512_ELL2,
    BANDERSNATCH_SW_SHA512_TAI,
    BABY_JUBJUB_SHA512_TAI,
    ED25519_SHA512_TAI,
    P256_SHA256_TAI,
    SECP256K1_SHA256_TAI,
):
    register(_suite)
del _suite

__all__ = [
    "get", "names", "register",
    "BandersnatchSha512Ell2", "BANDERSNATCH_SHA512_ELL2",
    "BandersnatchSwSha512Tai", "BANDERSNATCH_SW_SHA512_TAI",
    "BabyJubJubSha512Tai", "BABY_JUBJUB_SHA512_TAI",
    "Ed25519Sha512Tai", "ED25519_SHA512_TAI",
    "P256Sha256Tai", "P256_SHA256_TAI",
    "Secp256k1Sha256Tai", "SECP256K1_SHA256_TAI",
]
