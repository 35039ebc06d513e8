# tests for domain-separated hashing, hash-to-curve and nonces

import hashlib

import pytest

from ecvrf import hash as h
from ecvrf import suites
from ecvrf.keys import Input
from ecvrf.pedersen import PEDERSEN_BASE_SEED
from ecvrf.ring import ACCUMULATOR_BASE_SEED, PADDING_SEED

QUUX_DST = b"QUUX-V01-CS02-with-expander-SHA256-128"


class TestExpandMessage:
    """RFC 9380 appendix K.1 vectors for expand_message_xmd(SHA-256)."""

    def test_empty_message(self):
        out = h.expand_message_xmd(hashlib.sha256, b"", QUUX_DST, 0x20)
        assert out.hex() == (
            "68a985b87eb6b46952128911f2a4412bbc302a9d759667f87f7a21d803f07235"
        )

    def test_abc(self):
        out = h.expand_message_xmd(hashlib.sha256, b"abc", QUUX_DST, 0x20)
        assert out.hex() == (
            "d8ccab23b5985ccea865c6c97b6e5b8350e794e603b4b97902f53a8a0d605615"
        )

    def test_long_output(self):
        out = h.expand_message_xmd(hashlib.sha256, b"", QUUX_DST, 0x80)
        assert len(out) == 0x80
        assert out.hex().startswith("af84c27ccfd45d41914fdff5df25293e221afc53d8ad2ac06d5e3e29485dadbe")

    def test_limits(self):
        with pytest.raises(ValueError):
            h.expand_message_xmd(hashlib.sha256, b"", b"x" * 256, 32)
        with pytest.raises(ValueError):
            h.expand_message_xmd(hashlib.sha256, b"", QUUX_DST, 256 * 32)


class TestTaggedHash:
    """tests for suite-bound hashing."""

    def test_tags_separate_domains(self):
        s = suites.ED25519_SHA512_TAI
        a = h.tagged_hash(s, h.TAG_CHALLENGE, b"data")
        b = h.tagged_hash(s, h.TAG_POINT_TO_HASH, b"data")
        assert a != b
        assert a == hashlib.sha512(s.SUITE_ID + b"\x02data\x00").digest()

    def test_suites_separate_domains(self):
        a = h.tagged_hash(suites.ED25519_SHA512_TAI, h.TAG_CHALLENGE, b"x")
        b = h.tagged_hash(suites.BABY_JUBJUB_SHA512_TAI, h.TAG_CHALLENGE, b"x")
        assert a != b


class TestChaCha20Rng:
    """tests for the ChaCha20 byte stream."""

    def test_stream_is_split_invariant(self):
        a = h.ChaCha20Rng(b"s" * 32)
        b = h.ChaCha20Rng(b"s" * 32)
        assert a.read(10) + a.read(100) == b.read(110)

    def test_zero_key_keystream(self):
        # RFC 8439 appendix A.1, test vector #1
        rng = h.ChaCha20Rng(bytes(32))
        assert rng(64).hex() == (
            "76b8e0ada0f13d90405d6ae55386bd28bdd219b8a08ded1aa836efcc8b770dc7"
            "da41597c5157488d7724e03fb8d84a376a43b8f41518a11cc387b669b2ee6586"
        )

    def test_weight(self):
        a = h.ChaCha20Rng(bytes(32))
        b = h.ChaCha20Rng(bytes(32))
        w = a.weight()
        assert 0 <= w < 2**128
        assert w == int.from_bytes(b.read(16), "little")
        assert a.weight() != w

    def test_seed_length(self):
        with pytest.raises(ValueError):
            h.ChaCha20Rng(b"short")


class TestHashToCurve:
    """tests for try-and-increment and Elligator 2."""

    def test_outputs_in_prime_subgroup(self, suite):
        for data in (b"", b"foo", b"\x00" * 100):
            pt = suite.data_to_point(data)
            assert pt is not None
            assert pt.is_in_prime_subgroup()
            assert not pt.is_identity()

    def test_deterministic(self, suite):
        assert suite.data_to_point(b"foo") == suite.data_to_point(b"foo")
        assert suite.data_to_point(b"foo") != suite.data_to_point(b"bar")

    def test_elligator2_single_map_on_curve(self):
        curve = suites.BANDERSNATCH_SHA512_ELL2.curve
        for u in (0, 1, 5, 2**200 + 3):
            assert h.map_to_curve_ell2(curve, u).is_on_curve()

    def test_elligator2_z(self):
        field = suites.BANDERSNATCH_SHA512_ELL2.curve.base_field
        assert h._ell2_z(field) == 5

    def test_bandersnatch_sw_tai_hashes_every_input(self):
        s = suites.BANDERSNATCH_SW_SHA512_TAI
        for i in range(40):
            pt = s.data_to_point(b"msg %d" % i)
            assert pt is not None
            assert pt.is_in_prime_subgroup()
        assert Input.new(s, b"input") is not None

    def test_elligator2_needs_twisted_edwards(self):
        with pytest.raises(ValueError):
            h.hash_to_curve_ell2_rfc_9380(suites.P256_SHA256_TAI, b"x", b"id")

    def test_bandersnatch_fixed_bases(self):
        s = suites.BANDERSNATCH_SHA512_ELL2
        expected = {
            PEDERSEN_BASE_SEED: (
                6150229251051246713677296363717454238956877613358614224171740096471278798312,
                28442734166467795856797249030329035618871580593056783094884474814923353898473,
            ),
            ACCUMULATOR_BASE_SEED: (
                37805570861274048643170021838972902516980894313648523898085159469000338764576,
                14738305321141000190236674389841754997202271418876976886494444739226156422510,
            ),
            PADDING_SEED: (
                26287722405578650394504321825321286533153045350760430979437739593351290020913,
                19058981610000167534379068105702216971787064146691007947119244515951752366738,
            ),
        }
        for seed, (x, y) in expected.items():
            pt = s.data_to_point(seed)
            assert (pt.x, pt.y) == (x, y)

    def test_baby_jubjub_fixed_bases(self):
        s = suites.BABY_JUBJUB_SHA512_TAI
        assert (s.BLINDING_BASE.x, s.BLINDING_BASE.y) == (
            5376532244618542109661131277363905439212836542753147027865558121391900167688,
            16889430036387258317292938764306353102387558736297768366398133205840396603585,
        )
        assert (s.ACCUMULATOR_BASE.x, s.ACCUMULATOR_BASE.y) == (
            14244296864466975185765191286346905764168103931054421124968917222697157902984,
            1338211929751438779479461215010533627729802740411746374590569050486264053400,
        )
        assert (s.PADDING.x, s.PADDING.y) == (
            11609282441801662122102628199525114984581229682260025690337510332048945634398,
            8183188953682575835393390021093178644584738701798006422551483781204555462701,
        )

    def test_p256_blinding_base(self):
        bb = suites.P256_SHA256_TAI.BLINDING_BASE
        assert (bb.x, bb.y) == (
            55516455597544811540149985232155473070193196202193483189274003004283034832642,
            48580550536742846740990228707183741745344724157532839324866819111997786854582,
        )


class TestNonces:
    """tests for deterministic nonce derivation."""

    def test_rfc8032_needs_wide_hash(self):
        s = suites.P256_SHA256_TAI
        with pytest.raises(ValueError):
            h.nonce_rfc_8032(s, 1, s.generator())

    def test_rfc8032_deterministic(self):
        s = suites.ED25519_SHA512_TAI
        pt = s.data_to_point(b"in")
        k1 = h.nonce_rfc_8032(s, 42, pt)
        assert k1 == h.nonce_rfc_8032(s, 42, pt)
        assert k1 != h.nonce_rfc_8032(s, 43, pt)
        assert 0 <= k1 < s.order

    def test_rfc6979_range(self):
        s = suites.SECP256K1_SHA256_TAI
        pt = s.data_to_point(b"in")
        k = h.nonce_rfc_6979(s, 7, pt)
        assert 1 <= k < s.order
        assert k == s.nonce(7, pt)


class TestChallengeAndOutput:
    """tests for challenge and point-to-hash."""

    def test_challenge_width(self, suite):
        g = suite.generator()
        c = suite.challenge([g, g], b"ad")
        assert c < 2 ** (8 * suite.CHALLENGE_LEN)
        assert c != suite.challenge([g, g], b"other")

    def test_point_to_hash_layout(self):
        s = suites.BANDERSNATCH_SHA512_ELL2
        g = s.generator()
        expected = hashlib.sha512(
            s.SUITE_ID + b"\x03" + s.point_encode(g) + b"\x00"
        ).digest()
        assert s.point_to_hash(g) == expected
