from __future__ import annotations

import logging

from scheduler import Direction, LookPolicy
from simulation import DispatchMode, Dispatcher


class RoguePolicy(LookPolicy):
    name = "rogue"

    def choose_car(self, cars, call_floor, call_direction):
        return 99


def test_automatic_call_goes_straight_to_a_car(make_system):
    system = make_system(num_cars=2)
    call = system.call(6, "up")
    assert call is not None
    assert system.pending_calls == []
    assert [d.floor for d in system.cars[0].queue] == [6]
    assert system.cars[1].is_idle


def test_look_assignment_prefers_cheapest_car(make_system):
    system = make_system(num_cars=2)
    system.call(6, "up")
    system.call(3, "up")
    system.call(2, "down")
    first, second = system.cars
    assert [d.floor for d in first.queue] == [3, 6]
    assert [d.floor for d in second.queue] == [2]


def test_duplicate_pending_calls_collapse(make_system):
    system = make_system(mode="manual")
    first = system.call(4, "up")
    second = system.call(4, Direction.UP)
    assert first is second
    assert len(system.pending_calls) == 1
    system.call(4, "down")
    assert len(system.pending_calls) == 2


def test_invalid_calls_are_ignored(make_system, caplog):
    system = make_system(num_floors=5)
    assert system.call(9, "up") is None
    assert system.call(3, "sideways") is None
    assert system.call(3, "idle") is None
    assert system.pending_calls == []
    assert "outside 1..5" in caplog.text


def test_manual_call_waits_for_assignment(make_system, clock, events):
    system = make_system(num_cars=2, mode="manual")
    call = system.call(5, "down")
    assert [c.call_id for c in system.pending_calls] == [call.call_id]
    assert all(car.is_idle for car in system.cars)

    assert system.assign(call.call_id, 1)
    assert system.pending_calls == []
    clock.run()
    assert system.cars[1].current_floor == 5
    assert events.of("served")[0]["car_id"] == 1


def test_assign_unknown_ids(make_system):
    system = make_system(mode="manual")
    call = system.call(2, "up")
    assert not system.assign(call.call_id + 10, 0)
    assert not system.assign(call.call_id, 7)
    assert len(system.pending_calls) == 1


def test_manual_move_requires_idle_car(make_system, clock):
    system = make_system(mode="manual")
    assert not system.move_car(0, 1)
    assert system.move_car(0, 6)
    assert not system.move_car(0, 3)
    clock.run()
    assert system.cars[0].current_floor == 6
    assert system.move_car(0, 3)


def test_automatic_move_queues_behind_current_work(make_system, clock, events):
    system = make_system()
    system.move_car(0, 7)
    clock.run(until=1.5)
    assert system.move_car(0, 4)
    queue = system.cars[0].queue
    assert [d.floor for d in queue] == [4, 7]
    assert all(d.call_direction is None for d in queue)
    clock.run()
    assert events.served_floors() == [4, 7]


def test_move_unknown_car(make_system):
    assert not make_system().move_car(5, 3)


def test_auto_assign_all_uses_pre_pass_snapshot(make_system):
    system = make_system(num_cars=2, mode="manual")
    system.call(3, "up")
    system.call(8, "up")
    assert system.auto_assign_all() == 2
    first, second = system.cars
    # Both calls saw car 0 idle on floor 1, so car 0 gets both.
    assert [d.floor for d in first.queue] == [3, 8]
    assert second.is_idle
    assert system.pending_calls == []


def test_switching_to_automatic_drains_pending(make_system):
    system = make_system(num_cars=2, mode="manual")
    system.call(4, "up")
    system.call(9, "down")
    system.set_mode("automatic")
    assert system.mode is DispatchMode.AUTOMATIC
    assert system.pending_calls == []


def test_call_without_cars_stays_pending_until_cars_exist(clock, make_car):
    dispatcher = Dispatcher(clock=clock, policy=LookPolicy(), num_floors=10)
    call = dispatcher.call(4, "up")
    assert dispatcher.pending == [call]

    car = make_car()
    dispatcher.reset([car], 10)
    assert dispatcher.pending == []
    assert [d.floor for d in car.queue] == [4]


def test_policy_contract_violation_keeps_call_pending(clock, make_car, caplog):
    car = make_car()
    dispatcher = Dispatcher(clock=clock, policy=RoguePolicy(), cars=[car], num_floors=10)
    with caplog.at_level(logging.WARNING):
        call = dispatcher.call(5, "up")
    assert dispatcher.pending == [call]
    assert car.is_idle
    assert "unknown car 99" in caplog.text


def test_pending_calls_are_retried_on_next_call(clock, make_car):
    car = make_car()
    dispatcher = Dispatcher(clock=clock, policy=LookPolicy(), num_floors=10)
    dispatcher.call(4, "up")
    dispatcher.cars = [car]
    dispatcher.call(7, "up")
    assert dispatcher.pending == []
    assert [d.floor for d in car.queue] == [4, 7]


def test_assigned_call_keeps_request_time(make_system, clock, events):
    system = make_system(mode="manual")
    clock.run(until=10)
    call = system.call(2, "up")
    clock.run(until=20)
    system.assign(call.call_id, 0)
    clock.run()
    # waited 10 s for assignment plus one floor and the door cycle
    assert events.of("served")[0]["wait_time"] == 10 + 5
