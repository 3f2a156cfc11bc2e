import pytest

from sproutkit.cellproxy import DelayQueue, load_schedule


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def make_queue(schedule, clock, log=None):
    return DelayQueue("uplink", 20, schedule, clock, log if log is not None else [].append)


def test_load_schedule_adds_base(tmp_path):
    path = tmp_path / "trace"
    path.write_text("3\n4\n")
    assert load_schedule(path, 10) == [13, 14]


def test_schedule_must_be_non_decreasing():
    with pytest.raises(ValueError):
        make_queue([3, 1], FakeClock())


def test_init_logs_service_count():
    lines = []
    make_queue([5, 6], FakeClock(), lines.append)
    assert lines == ["Initialized uplink queue with 2 services."]


def test_one_packet_per_slot_regardless_of_size():
    clock = FakeClock()
    queue = make_queue([25, 60], clock)
    big = b"x" * 5000
    queue.write(big)
    queue.write(b"small")
    clock.now = 20
    assert queue.read() == []
    assert queue.wait_time() == 5
    clock.now = 25
    assert queue.read() == [big]
    clock.now = 60
    assert queue.read() == [b"small"]


def test_passed_slots_are_wasted():
    clock = FakeClock()
    queue = make_queue([10, 30, 40], clock)
    queue.write(b"p1")
    queue.write(b"p2")
    clock.now = 10
    assert queue.read() == []
    clock.now = 40
    assert queue.read() == [b"p1"]
    clock.now = 1000
    assert queue.read() == []


def test_wait_time_idle_default():
    clock = FakeClock()
    queue = make_queue([], clock)
    assert queue.wait_time() == 100


def test_wait_time_counts_down_delay():
    clock = FakeClock()
    queue = make_queue([100], clock)
    queue.write(b"p")
    clock.now = 5
    assert queue.wait_time() == 15
    clock.now = 50
    assert queue.wait_time() == 0


def test_delivery_and_statistics_logging():
    clock = FakeClock()
    lines = []
    queue = make_queue([20], clock, lines.append)
    queue.write(b"data")
    clock.now = 20
    assert queue.read() == [b"data"]
    assert "uplink 0.020000 delivery 20" in lines
    clock.now = 1000
    queue.read()
    stats = [l for l in lines if "/" in l]
    assert stats == ["uplink 0 1 / 1 = 100.0 %"]