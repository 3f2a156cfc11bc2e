import pytest

from sproutkit.cellsim import SERVICE_PACKET_SIZE, DelayQueue, load_schedule


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def make_queue(schedule, clock, log=None):
    return DelayQueue("uplink", 20, schedule, clock, log if log is not None else [].append)


def test_load_schedule_adds_base(tmp_path):
    path = tmp_path / "trace"
    path.write_text("0\n5\n10\n")
    assert load_schedule(path, 1000) == [1000, 1005, 1010]


def test_load_schedule_stops_at_garbage(tmp_path):
    path = tmp_path / "trace"
    path.write_text("1\n2\nx\n3\n")
    assert load_schedule(path, 100) == [101, 102]


def test_load_schedule_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_schedule(tmp_path / "absent", 0)


def test_schedule_must_be_non_decreasing():
    with pytest.raises(ValueError):
        make_queue([10, 5], FakeClock())


def test_init_logs_service_count():
    lines = []
    make_queue([1, 2, 3], FakeClock(), lines.append)
    assert lines == ["Initialized uplink queue with 3 services."]


def test_packet_waits_for_delay_and_schedule():
    clock = FakeClock()
    lines = []
    queue = make_queue([10, 30], clock, lines.append)
    queue.write(b"hello")
    clock.now = 10
    assert queue.read() == []
    clock.now = 30
    assert queue.read() == [b"hello"]
    assert "uplink 0.030000 delivery 30" in lines
    assert queue.read() == []


def test_large_packet_spans_two_opportunities():
    clock = FakeClock()
    queue = make_queue([20, 21], clock)
    packet = b"x" * (SERVICE_PACKET_SIZE + 500)
    queue.write(packet)
    clock.now = 20
    assert queue.read() == []
    clock.now = 21
    assert queue.read() == [packet]


def test_one_opportunity_carries_several_packets_in_order():
    clock = FakeClock()
    queue = make_queue([20], clock)
    packets = [bytes([n]) * (SERVICE_PACKET_SIZE // 3) for n in range(3)]
    for p in packets:
        queue.write(p)
    clock.now = 20
    assert queue.read() == packets


def test_leftover_packet_waits_for_next_opportunity():
    clock = FakeClock()
    queue = make_queue([20, 40], clock)
    first = b"a" * SERVICE_PACKET_SIZE
    second = b"b" * 10
    queue.write(first)
    queue.write(second)
    clock.now = 20
    assert queue.read() == [first]
    clock.now = 40
    assert queue.read() == [second]


def test_wait_time_uses_nearest_event():
    clock = FakeClock()
    queue = make_queue([50], clock)
    queue.write(b"p")
    assert queue.wait_time() == 20
    clock.now = 30
    assert queue.wait_time() == 20


def test_wait_time_when_idle():
    queue = make_queue([], FakeClock())
    assert queue.wait_time() == (1 << 31) - 1


def test_statistics_line_per_second():
    clock = FakeClock()
    lines = []
    queue = make_queue([20], clock, lines.append)
    queue.write(b"x" * 500)
    clock.now = 20
    assert queue.read() == [b"x" * 500]
    clock.now = 1000
    queue.read()
    queue.read()
    stats = [l for l in lines if "/" in l]
    assert stats == ["uplink 0 500 / 1500 = 33.3 %"]