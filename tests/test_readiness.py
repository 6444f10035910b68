from shopfloor.core import readiness
from shopfloor.models import Location, Order, OrderLocation
from shopfloor.models.enums import OrderLocationStatus as Status, Readiness


def make_order(total=100, **kwargs):
    return Order(order_number="SO-1", reference_number="R", client="C", total_quantity=total, is_shipped=kwargs.pop("is_shipped", False), **kwargs)


def make_row(location_id, status, completed=0, multiplier=1.0):
    location = Location(id=location_id, name=f"L{location_id}", used_order=location_id, count_multiplier=multiplier)
    return OrderLocation(location_id=location_id, location=location, status=status, completed_quantity=completed)


def test_completion_percentage_partial():
    order = make_order(100)
    rows = [make_row(1, Status.done, 100), make_row(2, Status.in_progress, 50)]
    assert readiness.completion_percentage(order, rows) == 75
    assert readiness.ship_readiness(order, rows) == Readiness.part_ready
    assert readiness.is_ready_to_ship(order, rows)


def test_fully_ready_when_all_done():
    order = make_order(100)
    rows = [make_row(1, Status.done, 100), make_row(2, Status.done, 100)]
    assert readiness.completion_percentage(order, rows) == 100
    assert readiness.ship_readiness(order, rows) == Readiness.fully_ready
    assert readiness.all_locations_done(rows)


def test_no_locations_is_zero_and_not_ready():
    order = make_order(100)
    assert readiness.completion_percentage(order, []) == 0
    assert readiness.ship_readiness(order, []) == Readiness.not_ready
    assert not readiness.all_locations_done([])


def test_rounding_half_up():
    order = make_order(8)
    # 1 / (8 * 4) = 3.125%
    rows = [make_row(1, Status.in_progress, 1)] + [make_row(i, Status.not_started) for i in (2, 3, 4)]
    assert readiness.completion_percentage(order, rows) == 3
    # 1 / (8 * 1) = 12.5% -> 13
    assert readiness.completion_percentage(order, [make_row(1, Status.in_progress, 1)]) == 13


def test_multiplier_counts_back_to_order_units():
    order = make_order(10)
    rows = [make_row(1, Status.done, 20, multiplier=2.0), make_row(2, Status.done, 10)]
    assert readiness.completion_percentage(order, rows) == 100


def test_not_ready_cases():
    order = make_order(100)
    # in_progress 但还没有完成数量
    rows = [make_row(1, Status.done, 100), make_row(2, Status.in_progress, 0)]
    assert readiness.ship_readiness(order, rows) == Readiness.not_ready
    # 没有任何工位完成
    rows = [make_row(1, Status.in_progress, 30), make_row(2, Status.in_progress, 30)]
    assert readiness.ship_readiness(order, rows) == Readiness.not_ready
    # 队列中的工位
    rows = [make_row(1, Status.done, 100), make_row(2, Status.in_queue)]
    assert readiness.ship_readiness(order, rows) == Readiness.not_ready


def test_shipped_order_is_not_ready():
    order = make_order(100, is_shipped=True)
    rows = [make_row(1, Status.done, 100)]
    assert readiness.ship_readiness(order, rows) == Readiness.not_ready


def test_placeholder_location_rows_ignored():
    order = make_order(10)
    rows = [make_row(1, Status.done, 10), make_row(0, Status.not_started)]
    assert readiness.completion_percentage(order, rows) == 100
    assert readiness.ship_readiness(order, rows) == Readiness.fully_ready
