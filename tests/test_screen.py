"""
AddressScreen membership semantics and ReadWriteLock behaviour under threads.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from stealthkeys.screen import AddressScreen, ReadWriteLock

SANCTIONED = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
CLEAN = "0x2B5AD5c4795c026514f8317c7a215E218DcCD6cF"


def test_initial_addresses_deduplicated():
    screen = AddressScreen([SANCTIONED, SANCTIONED, "opaque id", ""])
    assert len(screen) == 3
    assert screen.snapshot() == frozenset([SANCTIONED, "opaque id", ""])
    assert screen.is_sanctioned(SANCTIONED)
    assert screen.is_sanctioned("opaque id")
    assert not screen.is_sanctioned(CLEAN)


def test_empty_screen():
    screen = AddressScreen()
    assert len(screen) == 0
    assert not screen.is_sanctioned(SANCTIONED)


def test_add_is_idempotent():
    screen = AddressScreen()
    assert screen.add(SANCTIONED) is True
    assert screen.add(SANCTIONED) is False
    assert screen.snapshot() == frozenset([SANCTIONED])
    assert SANCTIONED in screen


def test_remove_absent_is_noop():
    screen = AddressScreen([SANCTIONED])
    assert screen.remove(CLEAN) is False
    assert screen.snapshot() == frozenset([SANCTIONED])

    assert screen.remove(SANCTIONED) is True
    assert screen.remove(SANCTIONED) is False
    assert not screen.is_sanctioned(SANCTIONED)


def test_addresses_compared_exactly():
    screen = AddressScreen([SANCTIONED])
    assert not screen.is_sanctioned(SANCTIONED.lower())


def test_readers_run_concurrently():
    """Two readers inside the read lock at once; a global mutex would break the barrier."""
    lock = ReadWriteLock()
    barrier = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read_locked():
            barrier.wait()
        return True

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(reader) for _ in range(2)]
        assert all(f.result(timeout=10) for f in futures)


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader():
        with lock.read_locked():
            entered.set()

    with lock.write_locked():
        t = threading.Thread(target=reader)
        t.start()
        assert not entered.wait(0.2)
    assert entered.wait(5)
    t.join(5)


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    written = threading.Event()

    def writer():
        with lock.write_locked():
            written.set()

    with lock.read_locked():
        t = threading.Thread(target=writer)
        t.start()
        assert not written.wait(0.2)
    assert written.wait(5)
    t.join(5)


def test_concurrent_reads_and_writes():
    """
    Readers on fixed addresses interleaved with writers on disjoint
    addresses: no deadlock, and every read sees a consistent answer.
    """
    fixed_in = [f"fixed-in-{i}" for i in range(10)]
    fixed_out = [f"fixed-out-{i}" for i in range(10)]
    screen = AddressScreen(fixed_in)

    def reader(rounds):
        for _ in range(rounds):
            for address in fixed_in:
                if not screen.is_sanctioned(address):
                    return False
            for address in fixed_out:
                if screen.is_sanctioned(address):
                    return False
        return True

    def writer(worker_id, rounds):
        address = f"writer-{worker_id}"
        for _ in range(rounds):
            screen.add(address)
            if not screen.is_sanctioned(address):
                return False
            screen.remove(address)
            if screen.is_sanctioned(address):
                return False
        screen.add(address)
        return True

    with ThreadPoolExecutor(max_workers=16) as pool:
        readers = [pool.submit(reader, 50) for _ in range(8)]
        writers = [pool.submit(writer, i, 50) for i in range(8)]
        assert all(f.result(timeout=60) for f in readers)
        assert all(f.result(timeout=60) for f in writers)

    assert screen.snapshot() == frozenset(fixed_in + [f"writer-{i}" for i in range(8)])
