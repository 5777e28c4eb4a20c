import math

import pytest

from quatfractal.quaternion import ONE, Quaternion, dist

SAMPLES = [
    Quaternion(2.5, 0.0, 0.0, 0.0),
    Quaternion(-0.75, 0.0, 0.0, 0.0),
    Quaternion(0.0, 1.5, -0.7, 2.0),
    Quaternion(0.0, 0.0, 0.0, -3.25),
    Quaternion(0.3, -1.2, 0.8, 0.5),
    Quaternion(-2.0, 0.1, 3.0, -0.4),
    Quaternion(1e-3, 7.0, -2.0, 0.25),
]


def assert_close(p, q, rel=1e-12):
    scale = max(1.0, p.norm(), q.norm())
    for got, want in zip(p, q):
        assert abs(got - want) <= rel * scale, (p, q)


def test_components_and_tuple():
    q = Quaternion(1, 2, 3, 4)
    assert q.as_tuple() == (1.0, 2.0, 3.0, 4.0)
    assert list(q) == [1.0, 2.0, 3.0, 4.0]
    assert Quaternion() == Quaternion(0.0, 0.0, 0.0, 0.0)


def test_add_subtract_componentwise():
    p = Quaternion(1, 2, 3, 4)
    q = Quaternion(0.5, -1, 2, -3)
    assert p + q == Quaternion(1.5, 1, 5, 1)
    assert p - q == Quaternion(0.5, 3, 1, 7)
    assert p.add(q) == p + q
    assert p.subtract(q) == p - q


def test_real_scalar_only_touches_real_part():
    p = Quaternion(1, 2, 3, 4)
    assert p + 2.0 == Quaternion(3, 2, 3, 4)
    assert 2.0 + p == Quaternion(3, 2, 3, 4)
    assert p - 1.0 == Quaternion(0, 2, 3, 4)
    assert 1.0 - p == Quaternion(0, -2, -3, -4)


def test_scalar_multiply_and_divide():
    p = Quaternion(1, -2, 3, -4)
    assert p * 2.0 == Quaternion(2, -4, 6, -8)
    assert 2.0 * p == p * 2.0
    assert p / 4.0 == Quaternion(0.25, -0.5, 0.75, -1.0)
    assert -p == Quaternion(-1, 2, -3, 4)


def test_hamilton_units():
    i = Quaternion(0, 1, 0, 0)
    j = Quaternion(0, 0, 1, 0)
    k = Quaternion(0, 0, 0, 1)
    assert i * j == k
    assert j * i == -k
    assert j * k == i
    assert k * i == j
    assert i * i == Quaternion(-1, 0, 0, 0)
    assert i.hamilton_product(j) == i.multiply(j)


def test_multiply_not_commutative():
    p, q = SAMPLES[4], SAMPLES[5]
    assert p * q != q * p


@pytest.mark.parametrize("p", SAMPLES)
def test_square_matches_product(p):
    assert_close(p.square(), p * p)


@pytest.mark.parametrize("p", SAMPLES)
def test_cube_matches_products(p):
    assert_close(p.cube(), p * p * p)
    assert_close(p.cube(), p.square() * p)


@pytest.mark.parametrize("p", SAMPLES)
def test_division_round_trip(p):
    for q in SAMPLES:
        assert_close((p / q) * q, p, rel=1e-10)


@pytest.mark.parametrize("p", SAMPLES)
def test_reciprocal_times_self_is_one(p):
    assert_close(p.reciprocal() * p, ONE, rel=1e-12)
    assert_close(p * p.reciprocal(), ONE, rel=1e-12)


def test_conjugate_and_norm():
    p = Quaternion(1, 2, 2, 4)
    assert p.conjugate() == Quaternion(1, -2, -2, -4)
    assert p.norm_sq() == 25.0
    assert p.norm() == 5.0
    assert abs(p) == 5.0
    assert_close(p * p.conjugate(), Quaternion(25.0, 0, 0, 0))


def test_normalize():
    for p in SAMPLES:
        assert p.normalize().norm() == pytest.approx(1.0, rel=1e-14)


def test_dist_symmetric_and_zero_on_diagonal():
    for p in SAMPLES:
        assert dist(p, p) == 0.0
        for q in SAMPLES:
            assert dist(p, q) == dist(q, p)
            assert p.distance(q) == pytest.approx((p - q).norm())


def test_pure_operations_do_not_mutate():
    p = Quaternion(0.3, -1.2, 0.8, 0.5)
    q = Quaternion(-2.0, 0.1, 3.0, -0.4)
    before = (p.as_tuple(), q.as_tuple())
    p + q, p - q, p * q, p / q, p.square(), p.cube(), p.conjugate(), p.reciprocal(), p.normalize()
    p + 1.0, p * 3.0, p / 3.0
    assert (p.as_tuple(), q.as_tuple()) == before


@pytest.mark.parametrize("p", SAMPLES)
def test_in_place_variants_match_pure(p):
    assert p.copy().square_self() == p.square()
    assert p.copy().cube_self() == p.cube()
    assert p.copy().conjugate_self() == p.conjugate()
    assert p.copy().reciprocate() == p.reciprocal()


def test_in_place_returns_same_object():
    p = Quaternion(1, 2, 3, 4)
    assert p.square_self() is p


def test_division_by_zero_quaternion_propagates_nan():
    r = Quaternion(1, 0, 0, 0) / Quaternion(0, 0, 0, 0)
    assert all(math.isnan(c) for c in r)


def test_division_by_zero_real_gives_infinity():
    r = Quaternion(1, -1, 0, 0) / 0.0
    assert r.a == math.inf
    assert r.x == -math.inf
    assert math.isnan(r.y)


def test_reciprocal_of_zero_does_not_raise():
    r = Quaternion().reciprocal()
    assert all(math.isnan(c) for c in r)
