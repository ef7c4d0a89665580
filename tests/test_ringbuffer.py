import pytest

from modhost.ringbuffer import RINGBUFFER_STORAGE, RingBuffer


def filled(values, size=4):
    rb = RingBuffer(size)
    for value in values:
        rb.push_sample(value)
    return rb


def test_new_buffer_is_empty():
    rb = RingBuffer(4)
    assert rb.empty()
    assert not rb.full()
    assert len(rb) == 0
    assert rb.back_index == 3
    assert rb.front_index == 0


def test_push_until_full():
    rb = filled([1.0, 2.0, 3.0, 4.0])
    assert rb.full()
    assert len(rb) == 4
    assert rb.front() == 1.0
    assert rb.back() == 4.0


def test_push_when_full_overwrites_oldest():
    rb = filled([1.0, 2.0, 3.0, 4.0, 5.0])
    assert len(rb) == 4
    assert rb.front() == 2.0
    assert rb.back() == 5.0
    assert rb.get(0) == 5.0


def test_pop_advances_front_and_ignores_empty():
    rb = filled([1.0, 2.0, 3.0, 4.0])
    rb.pop()
    assert len(rb) == 3
    assert rb.front() == 2.0
    empty = RingBuffer(4)
    empty.pop()
    assert len(empty) == 0
    assert empty.front_index == 0


def test_back_erase():
    rb = filled([1.0, 2.0, 3.0, 4.0])
    rb.back_erase(1)
    assert len(rb) == 3
    assert rb.back() == 3.0
    assert rb.front() == 1.0


def test_front_erase():
    rb = filled([1.0, 2.0, 3.0, 4.0])
    rb.front_erase(2)
    assert len(rb) == 2
    assert rb.front() == 3.0
    assert rb.back() == 4.0


@pytest.mark.parametrize("method", ["front_erase", "back_erase"])
def test_erase_everything_clears(method):
    rb = RingBuffer(4)
    for value in [1.0, -2.0, 3.0]:
        rb.push_and_calculate_power(value)
    getattr(rb, method)(10)
    assert rb.empty()
    assert rb.power == 0.0
    assert all(rb.get(i) == 0.0 for i in range(RINGBUFFER_STORAGE))
    assert rb.capacity == 4


def test_peak_index_finds_largest_positive():
    rb = filled([0.5, 3.0, 1.0])
    assert rb.peak_index() == 1
    assert rb.get(rb.peak_index()) == 3.0


def test_peak_index_without_positive_values_is_zero():
    assert RingBuffer(4).peak_index() == 0
    assert filled([-1.0, -2.0]).peak_index() == 0


def test_power_is_mean_absolute_value_of_window():
    rb = RingBuffer(4)
    values = [0.5, -1.0, 0.25, 2.0, -0.75, 1.5]
    for value in values:
        power = rb.push_and_calculate_power(value)
    window = values[-4:]
    assert power == pytest.approx(sum(abs(v) for v in window) / 4)
    assert rb.full()


def test_power_before_full_accumulates():
    rb = RingBuffer(8)
    assert rb.push_and_calculate_power(-4.0) == pytest.approx(0.5)
    assert len(rb) == 1


def test_clear_changes_size():
    rb = filled([1.0, 2.0, 3.0])
    rb.clear(2)
    assert rb.capacity == 2
    assert rb.empty()
    rb.push_sample(7.0)
    rb.push_sample(8.0)
    assert rb.full()


@pytest.mark.parametrize("size", [0, -1, RINGBUFFER_STORAGE + 1])
def test_invalid_size_raises(size):
    with pytest.raises(ValueError):
        RingBuffer(size)