"""
Tests for exclusive device access.
"""

import threading
import time

from gsmdriver.core import AccessLock, MockTransport


def test_exclusive_sets_and_clears_owner():
    """Test the lock records its owner while held."""
    lock = AccessLock()

    with lock.exclusive():
        assert lock.owner == threading.get_ident()
        assert lock.is_held()

    assert lock.owner is None
    assert not lock.is_held()


def test_reentry_does_not_deadlock():
    """Test the owner can re-enter its own exclusive section."""
    lock = AccessLock()
    done = threading.Event()

    def nested():
        with lock.exclusive():
            with lock.exclusive():
                with lock.exclusive():
                    pass
            # still held by the outer section
            assert lock.owner == threading.get_ident()
        done.set()

    thread = threading.Thread(target=nested)
    thread.start()
    thread.join(timeout=2.0)

    assert done.is_set()
    assert lock.owner is None


def test_explicit_owner_identifiers():
    """Test acquire/release with explicit owner identifiers."""
    lock = AccessLock()

    previous = lock.acquire("sender")
    assert previous is None
    assert lock.acquire("sender") == "sender"

    lock.release("sender")
    assert lock.owner == "sender"

    lock.release(previous)
    assert lock.owner is None


def test_released_on_exception():
    """Test the lock is released when the block raises."""
    lock = AccessLock()

    try:
        with lock.exclusive():
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert lock.owner is None


def test_concurrent_sections_never_interleave():
    """Test two threads' writes inside exclusive sections stay grouped."""
    lock = AccessLock(poll_interval=0.01)
    transport = MockTransport()

    def worker(tag):
        for _ in range(5):
            with lock.exclusive():
                transport.write(f"{tag}-start".encode())
                time.sleep(0.002)
                transport.write(f"{tag}-end".encode())

    threads = [threading.Thread(target=worker, args=(tag,)) for tag in ("a", "b")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5.0)

    written = transport.written_text
    assert len(written) == 20
    for start, end in zip(written[::2], written[1::2]):
        tag = start.split("-")[0]
        assert start == f"{tag}-start"
        assert end == f"{tag}-end"


def test_waiter_blocks_until_release():
    """Test a second thread waits for the holder to finish."""
    lock = AccessLock(poll_interval=0.01)
    events = []
    holding = threading.Event()

    def holder():
        with lock.exclusive():
            holding.set()
            time.sleep(0.1)
            events.append("holder done")

    def waiter():
        holding.wait()
        with lock.exclusive():
            events.append("waiter got lock")

    threads = [threading.Thread(target=holder), threading.Thread(target=waiter)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5.0)

    assert events == ["holder done", "waiter got lock"]


def test_command_waits_for_exclusive_sequence(modem_core, mock_transport):
    """Test a command from another thread can't break into a held sequence."""
    holding = threading.Event()

    def sequence():
        with modem_core.exclusive():
            mock_transport.write(b"first")
            holding.set()
            time.sleep(0.1)
            mock_transport.write(b"second")

    def poller():
        holding.wait()
        modem_core.command("AT")

    threads = [threading.Thread(target=sequence), threading.Thread(target=poller)]
    threads[0].start()
    holding.wait()
    # every write releases a response, "second" included
    mock_transport.add_response(["OK"])
    mock_transport.add_response(["OK"])
    threads[1].start()
    for thread in threads:
        thread.join(timeout=5.0)

    assert mock_transport.written[:2] == [b"first", b"second"]
    assert mock_transport.written[2] == b"AT\r"
