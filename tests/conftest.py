# pytest configuration and fixtures

"""
Test Configuration

Hypothesis Settings:
- Profiles: "dev" (default), "ci" and "extensive"
- Select with HYPOTHESIS_PROFILE=<name>

Curve arithmetic is pure Python, so property tests that touch points keep
their example counts low explicitly.
"""

import os

import pytest
from hypothesis import Phase, settings

from ecvrf import Input, Secret, suites

settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    print_blob=True,
)

settings.register_profile(
    "dev",
    max_examples=20,
    deadline=None,
)

settings.register_profile(
    "extensive",
    max_examples=500,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "dev"))


ALL_SUITES = [
    suites.BANDERSNATCH_SHA512_ELL2,
    suites.BANDERSNATCH_SW_SHA512_TAI,
    suites.BABY_JUBJUB_SHA512_TAI,
    suites.ED25519_SHA512_TAI,
    suites.P256_SHA256_TAI,
    suites.SECP256K1_SHA256_TAI,
]

RING_SUITES = [
    suites.BANDERSNATCH_SHA512_ELL2,
    suites.BABY_JUBJUB_SHA512_TAI,
]


@pytest.fixture(params=ALL_SUITES, ids=lambda s: s.NAME)
def suite(request):
    """every bundled suite."""
    return request.param


@pytest.fixture(params=RING_SUITES, ids=lambda s: s.NAME)
def ring_suite(request):
    """suites carrying the ring relation bases."""
    return request.param


@pytest.fixture
def secret(suite):
    return Secret.from_seed(suite, b"seed")


@pytest.fixture
def vrf_io(suite, secret):
    """(input, output) for the fixed input b"input"."""
    vrf_in = Input.new(suite, b"input")
    return vrf_in, secret.output(vrf_in)
