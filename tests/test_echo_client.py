import pytest

from basflow.echo_client import ECHO_MESSAGE, EchoClientWork, EchoClientWorkAllocator
from basflow.error_count import ErrorCount


class FakeBuffer:
    def __init__(self):
        self.data = bytearray()
        self.incoming = b""

    def clear(self):
        self.data.clear()

    def produce(self, count):
        self.data.extend(self.incoming[:count])
        self.incoming = self.incoming[count:]

    def __bytes__(self):
        return bytes(self.data)

    def __len__(self):
        return len(self.data)


class FakeHandler:
    def __init__(self):
        self.read_buffer = FakeBuffer()
        self.calls = []

    def async_write(self, data):
        self.calls.append(("write", bytes(data)))

    def async_read_some(self):
        self.calls.append(("read",))

    def close(self):
        self.calls.append(("close",))


class FakeTimer:
    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


@pytest.fixture
def timers():
    made = []

    def factory(interval, function):
        timer = FakeTimer(interval, function)
        made.append(timer)
        return timer

    factory.made = made
    return factory


def test_open_sends_the_fixed_message():
    handler = FakeHandler()
    EchoClientWork(ErrorCount(), 0).on_open(handler)
    assert handler.calls == [("write", b"echo server test message.....\r\n")]


def test_open_without_pause_writes_immediately():
    handler = FakeHandler()
    handler.read_buffer.data.extend(b"stale")
    work = EchoClientWork(ErrorCount(), 0)
    work.on_open(handler)
    assert handler.calls == [("write", ECHO_MESSAGE)]
    assert bytes(handler.read_buffer) == b""


def test_open_with_pause_waits_for_timer(timers):
    handler = FakeHandler()
    work = EchoClientWork(ErrorCount(), 3, timers)
    work.on_open(handler)
    assert handler.calls == []
    assert len(timers.made) == 1
    timer = timers.made[0]
    assert timer.interval == 3
    assert timer.started
    timer.fire()
    assert handler.calls == [("write", ECHO_MESSAGE)]


def test_cancelled_timeout_does_nothing(timers):
    handler = FakeHandler()
    work = EchoClientWork(ErrorCount(), 3, timers)
    work.on_open(handler)
    work.handle_timeout(handler, True)
    assert handler.calls == []


def test_timeout_after_write_does_not_resend(timers):
    handler = FakeHandler()
    work = EchoClientWork(ErrorCount(), 3, timers)
    work.on_open(handler)
    work.on_write(handler, len(ECHO_MESSAGE))
    assert work.waiting is False
    timers.made[0].fire()
    assert handler.calls == [("read",)]


def test_read_produces_and_closes():
    handler = FakeHandler()
    handler.read_buffer.incoming = ECHO_MESSAGE
    work = EchoClientWork(ErrorCount())
    work.on_read(handler, len(ECHO_MESSAGE))
    assert bytes(handler.read_buffer) == ECHO_MESSAGE
    assert handler.calls == [("close",)]


def test_close_with_matching_echo_counts_nothing():
    counter = ErrorCount()
    handler = FakeHandler()
    handler.read_buffer.data.extend(ECHO_MESSAGE)
    EchoClientWork(counter).on_close(handler, None)
    assert (counter.get_timeout(), counter.get_error()) == (0, 0)


def test_close_with_wrong_echo_counts_error():
    counter = ErrorCount()
    handler = FakeHandler()
    handler.read_buffer.data.extend(ECHO_MESSAGE[:-1])
    EchoClientWork(counter).on_close(handler, ConnectionResetError())
    assert (counter.get_timeout(), counter.get_error()) == (0, 1)


def test_timeout_with_matching_echo_counts_timeout_only():
    counter = ErrorCount()
    handler = FakeHandler()
    handler.read_buffer.data.extend(ECHO_MESSAGE)
    EchoClientWork(counter).on_close(handler, TimeoutError())
    assert (counter.get_timeout(), counter.get_error()) == (1, 0)


def test_timeout_with_empty_buffer_counts_both():
    counter = ErrorCount()
    handler = FakeHandler()
    EchoClientWork(counter).on_close(handler, TimeoutError())
    assert (counter.get_timeout(), counter.get_error()) == (1, 1)


def test_close_cancels_pending_timer(timers):
    handler = FakeHandler()
    work = EchoClientWork(ErrorCount(), 3, timers)
    work.on_open(handler)
    work.on_close(handler, None)
    assert timers.made[0].cancelled
    assert work.waiting is False


def test_parent_and_child_events_ignored():
    handler = FakeHandler()
    work = EchoClientWork(ErrorCount())
    work.on_parent(handler, object())
    work.on_child(handler, object())
    work.on_clear(handler)
    assert handler.calls == []


def test_allocator_shares_counter_and_pause(timers):
    counter = ErrorCount()
    allocator = EchoClientWorkAllocator(counter, 5, timers)
    first = allocator.make_handler()
    second = allocator.make_handler()
    assert first is not second
    assert first.error_count is counter and second.error_count is counter
    assert first.pause_time == 5
    handler = FakeHandler()
    first.on_open(handler)
    assert timers.made[0].interval == 5
    second.on_close(FakeHandler(), None)
    assert counter.get_error() == 1