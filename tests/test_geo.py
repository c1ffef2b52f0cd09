import math

import pytest

from oceanwatch.utils.geo import haversine_km

CHENNAI = (13.0827, 80.2707)
MUMBAI = (19.0760, 72.8777)
GOA = (15.2993, 74.1240)


def test_identical_points_are_zero():
    assert haversine_km(*CHENNAI, *CHENNAI) == 0.0


@pytest.mark.parametrize("a,b", [(CHENNAI, MUMBAI), (GOA, CHENNAI), ((0.0, 0.0), (-45.0, 170.0))])
def test_symmetric(a, b):
    assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))


def test_chennai_to_mumbai_distance():
    assert haversine_km(*CHENNAI, *MUMBAI) == pytest.approx(1030, abs=15)


def test_quarter_meridian():
    # Equator to pole is a quarter of the circumference at R=6371
    assert haversine_km(0, 0, 90, 0) == pytest.approx(math.pi * 6371 / 2)


def test_antipodes_do_not_raise():
    assert haversine_km(0, 0, 0, 180) == pytest.approx(math.pi * 6371)


def test_nan_propagates():
    assert math.isnan(haversine_km(float("nan"), 80.0, 13.0, 80.0))
