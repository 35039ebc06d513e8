# tests for point and scalar wire formats

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ecvrf import suites
from ecvrf.codec import ArkworksCodec, Endianness, Sec1Codec
from ecvrf.curves import BANDERSNATCH, BANDERSNATCH_SW, SECP256R1
from ecvrf.errors import InvalidData

ENCODED_LENGTHS = {
    "Bandersnatch_SHA-512_ELL2": (32, 32),
    "Bandersnatch_SW_SHA-512_TAI": (33, 32),
    "BabyJubJub_SHA-512_TAI": (32, 32),
    "Ed25519_SHA-512_TAI": (32, 32),
    "P256_SHA-256_TAI": (33, 32),
    "Secp256k1_SHA-256_TAI": (33, 32),
}


class TestSuiteCodecs:
    """round trips through every suite codec."""

    def test_lengths(self, suite):
        assert (suite.POINT_ENCODED_LEN, suite.SCALAR_ENCODED_LEN) == \
            ENCODED_LENGTHS[suite.NAME]

    def test_point_round_trip(self, suite):
        g = suite.generator()
        for k in (1, 2, 7, suite.order - 1):
            pt = suite.curve.mul(g, k)
            buf = suite.point_encode(pt)
            assert len(buf) == suite.POINT_ENCODED_LEN
            assert suite.point_decode(buf) == pt

    def test_negation_changes_encoding(self, suite):
        g = suite.generator()
        assert suite.point_encode(g) != suite.point_encode(-g)

    def test_scalar_round_trip(self, suite):
        for k in (0, 1, 2**128 + 5, suite.order - 1):
            buf = suite.scalar_encode(k)
            assert len(buf) == suite.SCALAR_ENCODED_LEN
            assert suite.scalar_decode(buf) == k

    def test_scalar_out_of_range_rejected(self, suite):
        order = suite.order
        buf = order.to_bytes(suite.SCALAR_ENCODED_LEN, suite.codec.ENDIANNESS.value)
        with pytest.raises(InvalidData):
            suite.scalar_decode(buf, checked=True)
        assert suite.codec.scalar_decode(buf) == 0

    def test_scalar_wrong_length_rejected(self, suite):
        with pytest.raises(InvalidData):
            suite.scalar_decode(b"\x01" * (suite.SCALAR_ENCODED_LEN + 1))

    def test_point_wrong_length_rejected(self, suite):
        buf = suite.point_encode(suite.generator())
        with pytest.raises(InvalidData):
            suite.point_decode(buf[:-1])

    def test_endianness(self, suite):
        big = suite.NAME.startswith(("P256", "Secp256k1"))
        assert suite.codec.BIG_ENDIAN is big
        expected = b"\x00" * 31 + b"\x01" if big else b"\x01" + b"\x00" * 31
        assert suite.scalar_encode(1) == expected


class TestArkworksCodec:
    """tests for the little-endian flagged format."""

    def test_te_sign_bit(self):
        codec = ArkworksCodec(BANDERSNATCH)
        g = BANDERSNATCH.generator
        a, b = codec.point_encode(g), codec.point_encode(-g)
        assert a[:-1] == b[:-1]
        assert (a[-1] ^ b[-1]) == 0x80
        assert a[:31] == g.y.to_bytes(32, "little")[:31]

    def test_te_non_canonical_rejected(self):
        codec = ArkworksCodec(BANDERSNATCH)
        p = BANDERSNATCH.base_field.modulus
        with pytest.raises(InvalidData):
            codec.point_decode(p.to_bytes(32, "little"))

    def test_te_subgroup_check(self):
        codec = ArkworksCodec(BANDERSNATCH)
        p = BANDERSNATCH.base_field.modulus
        t2 = BANDERSNATCH.point(0, p - 1)
        buf = codec.point_encode(t2)
        assert codec.point_decode(buf) == t2
        with pytest.raises(InvalidData):
            codec.point_decode(buf, checked=True)

    def test_sw_infinity(self):
        codec = ArkworksCodec(BANDERSNATCH_SW)
        buf = codec.point_encode(BANDERSNATCH_SW.identity())
        assert buf == bytes(32) + b"\x40"
        assert codec.point_decode(buf).is_identity()
        with pytest.raises(InvalidData):
            codec.point_decode(bytes(32) + b"\xc0")

    def test_sw_candidate_is_x_coordinate(self):
        codec = ArkworksCodec(BANDERSNATCH_SW)
        assert codec.candidate_len() == 32
        g = BANDERSNATCH_SW.generator
        # flag bits of a hash-sized buffer never come into play
        pt = codec.candidate_point(g.x.to_bytes(32, "little") + b"\xff" * 32)
        assert pt is not None
        assert pt.x == g.x
        assert not ArkworksCodec._is_negative(pt.y, BANDERSNATCH_SW.base_field.modulus)

    def test_sw_candidate_out_of_range(self):
        codec = ArkworksCodec(BANDERSNATCH_SW)
        assert codec.candidate_point(b"\xff" * 64) is None

    def test_endianness_tag(self):
        assert ArkworksCodec.ENDIANNESS is Endianness.LITTLE
        assert Sec1Codec.ENDIANNESS is Endianness.BIG


class TestSec1Codec:
    """tests for the SEC 1 compressed format."""

    def test_identity(self):
        codec = Sec1Codec(SECP256R1)
        assert codec.point_encode(SECP256R1.identity()) == b"\x00"
        assert codec.point_decode(b"\x00").is_identity()

    def test_generator_encoding(self):
        codec = Sec1Codec(SECP256R1)
        buf = codec.point_encode(SECP256R1.generator)
        assert buf.hex() == (
            "036b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296"
        )

    def test_bad_prefix(self):
        codec = Sec1Codec(SECP256R1)
        buf = bytearray(codec.point_encode(SECP256R1.generator))
        buf[0] = 0x05
        with pytest.raises(InvalidData):
            codec.point_decode(bytes(buf))

    def test_twisted_edwards_through_companion(self):
        codec = Sec1Codec(BANDERSNATCH)
        for k in (1, 3, 2**64 + 1):
            pt = BANDERSNATCH.mul(BANDERSNATCH.generator, k)
            buf = codec.point_encode(pt)
            assert len(buf) == 33
            assert buf[0] in (0x02, 0x03)
            assert codec.point_decode(buf, checked=True) == pt

    def test_candidate_without_prefix(self):
        codec = Sec1Codec(SECP256R1)
        assert codec.candidate_len() == 32
        g = SECP256R1.generator
        x = g.x.to_bytes(32, "big")
        pt = codec.candidate_point(x)
        assert pt is not None
        assert pt.x == g.x and pt.y % 2 == 0

    def test_candidate_too_short(self):
        assert Sec1Codec(SECP256R1).candidate_point(b"\x01" * 8) is None


class TestScalarProperties:
    """property tests for scalar encodings."""

    @given(k=st.integers(min_value=0, max_value=2**252))
    def test_little_endian_round_trip(self, k):
        s = suites.BANDERSNATCH_SHA512_ELL2
        assert s.scalar_decode(s.scalar_encode(k)) == k % s.order

    @given(k=st.integers(min_value=0, max_value=2**256))
    def test_big_endian_round_trip(self, k):
        s = suites.P256_SHA256_TAI
        assert s.scalar_decode(s.scalar_encode(k)) == k % s.order


class TestRegistry:
    """tests for suite lookup by name."""

    def test_names(self):
        assert sorted(suites.names()) == sorted(ENCODED_LENGTHS)

    def test_get_is_case_insensitive(self):
        assert suites.get("ed25519_sha-512_tai") is suites.ED25519_SHA512_TAI
        assert suites.get("P256_SHA-256_TAI") is suites.P256_SHA256_TAI

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            suites.get("Curve448_SHA-512_TAI")

    def test_register_is_idempotent_per_object(self):
        assert suites.register(suites.ED25519_SHA512_TAI) is suites.ED25519_SHA512_TAI

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError):
            suites.register(suites.Ed25519Sha512Tai())
