import pytest

from basflow.client_work import ClientWork, Event, EventKind


class FakeBuffer:
    def __init__(self, capacity=64):
        self.data = bytearray()
        self.capacity = capacity
        self.produced = 0
        self.crunched = 0

    def clear(self):
        self.data.clear()
        self.produced = 0

    def produce(self, count):
        self.produced += count

    def consume(self, count):
        del self.data[:count]

    def crunch(self):
        self.crunched += 1

    def space(self):
        return self.capacity - len(self.data)

    def write(self, data):
        self.data.extend(data)

    def __len__(self):
        return len(self.data)

    def __bytes__(self):
        return bytes(self.data)


class FakeHandler:
    def __init__(self):
        self.read_buffer = FakeBuffer()
        self.calls = []
        self.child_events = []
        self.parent_events = []

    def async_read_some(self):
        self.calls.append("read")

    def async_write(self, data):
        self.calls.append(("write", data))

    def close(self):
        self.calls.append("close")

    def child_post(self, event):
        self.child_events.append(event)

    def parent_post(self, event):
        self.parent_events.append(event)

    def remote_endpoint(self):
        return ("127.0.0.1", 9)


@pytest.fixture
def linked():
    work = ClientWork()
    handler = FakeHandler()
    parent = FakeHandler()
    work.on_set_parent(handler, parent)
    return work, handler, parent


def test_set_parent_requires_handler():
    with pytest.raises(ValueError):
        ClientWork().on_set_parent(FakeHandler(), None)


def test_open_without_parent_raises():
    with pytest.raises(RuntimeError):
        ClientWork().on_open(FakeHandler())


def test_open_clears_buffer_and_notifies(linked):
    work, handler, parent = linked
    handler.read_buffer.write(b"old")
    work.on_open(handler)
    assert len(handler.read_buffer) == 0
    assert parent.child_events == [Event(EventKind.OPEN)]


def test_read_produces_and_notifies(linked):
    work, handler, parent = linked
    work.on_read(handler, 5)
    assert handler.read_buffer.produced == 5
    assert parent.child_events == [Event(EventKind.READ, 5)]


def test_write_notifies_parent(linked):
    work, handler, parent = linked
    handler.read_buffer.write(b"abcdef")
    work.on_write(handler, 4)
    assert bytes(handler.read_buffer) == b"ef"
    assert handler.read_buffer.crunched == 1
    assert parent.child_events == [Event(EventKind.WRITE, 4)]


def test_write_read_continues_with_read(linked):
    work, handler, parent = linked
    handler.read_buffer.write(b"ping")
    work.on_parent(handler, Event(EventKind.WRITE_READ))
    assert handler.calls == [("write", b"ping")]
    work.on_write(handler, 4)
    assert handler.calls[-1] == "read"
    assert parent.child_events == []


def test_parent_read_request(linked):
    work, handler, _ = linked
    work.on_parent(handler, Event(EventKind.READ))
    assert handler.calls == ["read"]


def test_parent_close_is_passive(linked):
    work, handler, parent = linked
    work.on_parent(handler, Event(EventKind.CLOSE))
    assert handler.calls == ["close"]
    work.on_close(handler, None)
    assert parent.child_events == []
    assert work.server_handler is None


def test_active_close_notifies_parent(linked):
    work, handler, parent = linked
    error = ConnectionResetError()
    work.on_close(handler, error)
    assert parent.child_events == [Event(EventKind.CLOSE, 0, error)]
    assert work.server_handler is None
    work.on_close(handler, None)
    assert len(parent.child_events) == 1