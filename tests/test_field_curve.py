# tests for prime fields, curve arithmetic and the TE <-> SW companion map

import ecdsa
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ecvrf.curve import CurveForm, Point, ShortWeierstrassCurve
from ecvrf.curves import (
    BABY_JUBJUB,
    BANDERSNATCH,
    BANDERSNATCH_SW,
    ED25519,
    SECP256K1,
    SECP256R1,
)
from ecvrf.errors import InvalidData
from ecvrf.field import PrimeField
from ecvrf.hash import ChaCha20Rng

ALL_CURVES = [BANDERSNATCH, BANDERSNATCH_SW, BABY_JUBJUB, ED25519, SECP256R1, SECP256K1]
TE_CURVES = [BANDERSNATCH, BABY_JUBJUB, ED25519]


class TestPrimeField:
    """tests for PrimeField."""

    @pytest.mark.parametrize("field", [
        BANDERSNATCH.base_field,    # p = 1 mod 4, Cipolla
        SECP256R1.base_field,       # p = 3 mod 4 shortcut
        BABY_JUBJUB.base_field,
    ], ids=["bls12-381-r", "p256", "bn254-r"])
    @settings(max_examples=10)
    @given(v=st.integers(min_value=1, max_value=2**250))
    def test_sqrt_of_square(self, field, v):
        sq = v * v % field.modulus
        r = field.sqrt(sq)
        assert r is not None
        assert r * r % field.modulus == sq

    def test_sqrt_of_nonresidue_is_none(self):
        field = SECP256R1.base_field
        z = 2
        while field.is_square(z):
            z += 1
        assert field.sqrt(z) is None

    def test_zero_is_square(self):
        field = ED25519.base_field
        assert field.is_square(0)
        assert field.sqrt(0) == 0

    def test_batch_inverse_matches_inv(self):
        field = BANDERSNATCH.scalar_field
        values = [3, 7, 2**200 + 1, field.modulus - 1]
        assert field.batch_inverse(values) == [field.inv(v) for v in values]
        assert field.batch_inverse([]) == []

    def test_inverse_of_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            BANDERSNATCH.base_field.inv(0)

    def test_random_with_seeded_source(self):
        field = BABY_JUBJUB.scalar_field
        a = field.random(ChaCha20Rng(b"x" * 32))
        b = field.random(ChaCha20Rng(b"x" * 32))
        assert a == b
        assert 0 < a < field.modulus

    def test_sizes(self):
        assert BANDERSNATCH.base_field.bits == 255
        assert BANDERSNATCH.scalar_field.bits == 253
        assert BABY_JUBJUB.scalar_field.bits == 251
        assert SECP256R1.base_field.byte_len == 32

    def test_even_modulus_rejected(self):
        with pytest.raises(ValueError):
            PrimeField(2**64)

    def test_byte_reduction(self):
        field = PrimeField(13)
        assert field.from_le_bytes_mod_order(b"\x0e\x00") == 1
        assert field.from_be_bytes_mod_order(b"\x00\x0e") == 1
        assert field.to_be_bytes(5) == b"\x05"


class TestCurves:
    """tests for curve groups."""

    @pytest.mark.parametrize("curve", ALL_CURVES, ids=lambda c: c.name)
    def test_generator_in_prime_subgroup(self, curve):
        g = curve.generator
        assert g.is_on_curve()
        assert g.is_in_prime_subgroup()
        assert curve.mul(g, curve.order).is_identity()
        assert not g.is_identity()

    @pytest.mark.parametrize("curve", ALL_CURVES, ids=lambda c: c.name)
    def test_group_laws(self, curve):
        g = curve.generator
        g2 = g + g
        assert g2 == curve.mul(g, 2)
        assert g2 - g == g
        assert (g + (-g)).is_identity()
        assert 3 * g == g2 + g
        assert g * 3 == 3 * g
        assert g + curve.identity() == g
        assert curve.mul(g, -1) == -g

    @pytest.mark.parametrize("curve", ALL_CURVES, ids=lambda c: c.name)
    def test_msm_matches_naive(self, curve):
        g = curve.generator
        pts = [g, curve.mul(g, 5), curve.mul(g, 11), curve.identity()]
        ks = [2**130 + 3, 17, curve.order - 1, 99]
        naive = curve.identity()
        for p, k in zip(pts, ks):
            naive = naive + curve.mul(p, k)
        assert curve.msm(pts, ks) == naive

    @pytest.mark.parametrize("curve", ALL_CURVES, ids=lambda c: c.name)
    def test_msm_many_matches_msm(self, curve):
        g = curve.generator
        h = curve.mul(g, 7)
        rows = [([g, h], [3, 4]), ([h], [0]), ([g, h], [1, -1])]
        assert curve.msm_many(rows) == [curve.msm(p, k) for p, k in rows]

    def test_msm_length_mismatch(self):
        with pytest.raises(ValueError):
            BANDERSNATCH.msm([BANDERSNATCH.generator], [1, 2])

    def test_point_validation(self):
        g = BANDERSNATCH.generator
        with pytest.raises(InvalidData):
            BANDERSNATCH.point(g.x, (g.y + 1) % BANDERSNATCH.base_field.modulus)

    def test_mixing_curves_rejected(self):
        with pytest.raises(ValueError):
            BANDERSNATCH.generator + BABY_JUBJUB.generator

    def test_small_order_point_outside_subgroup(self):
        p = BANDERSNATCH.base_field.modulus
        t2 = BANDERSNATCH.point(0, p - 1)
        assert t2.is_on_curve()
        assert not t2.is_in_prime_subgroup()
        assert t2.clear_cofactor().is_identity()

    def test_points_hashable(self):
        g = ED25519.generator
        assert len({g, ED25519.mul(g, 1), ED25519.mul(g, 2)}) == 2

    def test_secp256k1_backend_matches_ecdsa(self):
        k1 = SECP256K1
        plain = ShortWeierstrassCurve(
            "secp256k1-ecdsa", k1.base_field, k1.scalar_field, 1, 0, 7,
            (k1.generator.x, k1.generator.y),
        )
        for k in (1, 2, 12345, k1.order - 1, 2**200 + 7):
            a = k1.mul(k1.generator, k)
            b = plain.mul(plain.generator, k)
            assert (a.x, a.y) == (b.x, b.y)
        assert k1.mul(k1.generator, k1.order).is_identity()

    def test_named_curves_adopt_ecdsa_parameters(self):
        assert SECP256R1._ec is ecdsa.NIST256p.curve
        assert SECP256R1.order == ecdsa.NIST256p.order
        assert SECP256R1.generator.x == ecdsa.NIST256p.generator.x()
        assert ED25519._ec is ecdsa.Ed25519.curve
        assert ED25519.cofactor == 8
        assert ED25519.generator.y == ecdsa.Ed25519.generator.y()

    @pytest.mark.parametrize("curve", ALL_CURVES, ids=lambda c: c.name)
    def test_fixed_base_matches_variable_base(self, curve):
        g = curve.generator
        k = 2**190 + 12345
        assert curve.mul(g, k) == curve._drop(curve._lift(g) * k)
        assert curve.mul(g, curve.order + 5) == curve.mul(g, 5)

    def test_torsion_component_rejected(self):
        p = BANDERSNATCH.base_field.modulus
        g = BANDERSNATCH.generator
        t2 = BANDERSNATCH.point(0, p - 1)
        mixed = g + t2
        assert mixed == Point(BANDERSNATCH, p - g.x, p - g.y)
        assert mixed.is_on_curve()
        assert not mixed.is_in_prime_subgroup()
        assert mixed.clear_cofactor() == BANDERSNATCH.mul(g, 4)

        sw_t2 = BANDERSNATCH.to_sw(t2)
        assert sw_t2.y == 0
        assert not sw_t2.is_in_prime_subgroup()
        assert not (BANDERSNATCH_SW.generator + sw_t2).is_in_prime_subgroup()

    def test_four_torsion_addition(self):
        curve = BABY_JUBJUB
        p = curve.base_field.modulus
        x4 = curve.recover_x(0)
        assert x4 is not None
        t4 = curve.point(x4, 0)
        assert not t4.is_in_prime_subgroup()
        assert (t4 + t4) == curve.point(0, p - 1)
        g = curve.generator
        assert (g + t4) - t4 == g

    def test_secp256k1_add_edge_cases(self):
        g = SECP256K1.generator
        assert SECP256K1.add(g, -g).is_identity()
        assert SECP256K1.add(g, g) == SECP256K1.mul(g, 2)
        assert SECP256K1.add(SECP256K1.identity(), g) == g


class TestCompanionMap:
    """tests for the twisted Edwards <-> short Weierstrass map."""

    @pytest.mark.parametrize("curve", TE_CURVES, ids=lambda c: c.name)
    def test_round_trip(self, curve):
        for k in (1, 2, 3, 2**100 + 9):
            pt = curve.mul(curve.generator, k)
            sw = curve.to_sw(pt)
            assert sw.curve is curve.sw
            assert sw.is_on_curve()
            assert curve.from_sw(sw) == pt

    @pytest.mark.parametrize("curve", TE_CURVES, ids=lambda c: c.name)
    def test_homomorphism(self, curve):
        g = curve.generator
        h = curve.mul(g, 5)
        assert curve.to_sw(g + h) == curve.to_sw(g) + curve.to_sw(h)
        assert curve.to_sw(curve.identity()).is_identity()

    def test_companion_generator(self):
        assert BANDERSNATCH_SW.form is CurveForm.SHORT_WEIERSTRASS
        assert BANDERSNATCH_SW.generator == BANDERSNATCH.to_sw(BANDERSNATCH.generator)
        assert BANDERSNATCH_SW.order == BANDERSNATCH.order

    def test_two_torsion_point_maps(self):
        p = BANDERSNATCH.base_field.modulus
        t2 = BANDERSNATCH.point(0, p - 1)
        assert BANDERSNATCH.from_sw(BANDERSNATCH.to_sw(t2)) == t2

    def test_foreign_point_rejected(self):
        with pytest.raises(ValueError):
            BANDERSNATCH.from_sw(SECP256R1.generator)
