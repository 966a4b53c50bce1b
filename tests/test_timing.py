from __future__ import annotations

import pytest

from simulation.timing import TimingModel, trip_category


def trip_time(timing, floors):
    return sum(
        timing.moving_step(floors, starting=step == 0, stopping=step == floors - 1)
        for step in range(floors)
    )


@pytest.mark.parametrize(
    "floors,expected",
    [(0, 0.0), (1, 2.0), (2, 4.0), (3, 2.0), (5, 4.0), (10, 9.0)],
)
def test_trip_time_follows_travel_profile(floors, expected):
    assert trip_time(TimingModel(), floors) == pytest.approx(expected)


def test_trip_categories():
    assert trip_category(2) == "short"
    assert trip_category(-4) == "medium"
    assert trip_category(6) == "long"


def test_short_trip_is_charged_per_floor():
    timing = TimingModel()
    assert timing.moving_step(2, starting=True, stopping=False) == pytest.approx(2.0)
    assert timing.moving_step(0, starting=True, stopping=True) == pytest.approx(2.0)


def test_long_trip_steps_and_reversal():
    timing = TimingModel()
    assert timing.moving_step(8, starting=True, stopping=False) == pytest.approx(0.5)
    assert timing.moving_step(8, starting=False, stopping=False) == pytest.approx(1.0)
    assert timing.moving_step(8, starting=False, stopping=True) == pytest.approx(0.5)
    assert timing.moving_step(8, starting=True, stopping=False, reversing=True) == pytest.approx(1.5)


def test_door_dwell_depends_on_passengers():
    timing = TimingModel(random_seed=3)
    samples = [timing.doors_open() for _ in range(50)]
    assert min(samples) >= 3.0 + 2 * 0.5
    assert max(samples) <= 3.0 + 6 * 0.5
    assert len(set(samples)) > 1


def test_speed_scales_every_duration():
    timing = TimingModel(speed=2.0)
    assert timing.doors_opening() == pytest.approx(1.25)
    assert timing.doors_closing() == pytest.approx(1.0)
    assert timing.arriving() == pytest.approx(0.5)
    assert timing.moving_step(1, starting=True, stopping=True) == pytest.approx(1.0)


def test_seeded_dwell_is_reproducible():
    first = [TimingModel(random_seed=11).doors_open() for _ in range(3)]
    assert len(set(first)) == 1


def test_speed_must_be_positive():
    with pytest.raises(ValueError):
        TimingModel(speed=0)


def test_instant_timing_has_unit_stages():
    timing = TimingModel.instant()
    for floors in (1, 4, 9):
        assert timing.moving_step(floors, starting=True, stopping=True, reversing=True) == 1.0
        assert timing.moving_step(floors, starting=False, stopping=False) == 1.0
    assert timing.doors_open() == 1.0
