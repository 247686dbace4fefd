"""Tests for testlane.testing.scheduler module."""

import threading
import time

import pytest

from testlane.testing.models import Test, TestProperties
from testlane.testing.scheduler import WorkQueue


def make_test(name: str) -> Test:
    return Test(test_properties=TestProperties("QueueTest", name), body=lambda ctx: None)


class TestWorkQueue:
    def test_initialize_preserves_order(self):
        tests = [make_test(f"t{i}") for i in range(5)]
        queue = WorkQueue.initialize(tests)

        taken = []
        while (test := queue.dequeue(0)) is not None:
            taken.append(test)
            queue.complete(test)

        assert taken == tests

    def test_empty_queue_is_exhausted(self):
        assert WorkQueue.initialize([]).dequeue(0) is None

    def test_dequeue_tracks_in_flight(self):
        queue = WorkQueue.initialize([make_test("a"), make_test("b")])
        test = queue.dequeue(0)
        assert queue.in_flight == 1
        assert len(queue) == 1
        queue.complete(test)
        assert queue.in_flight == 0

    def test_requeue_appends_to_back(self):
        a, b = make_test("a"), make_test("b")
        queue = WorkQueue.initialize([a, b])

        first = queue.dequeue(0)
        queue.requeue(first)
        queue.complete(first)

        assert queue.dequeue(0) is b
        assert queue.dequeue(0) is a
        assert queue.requeued == 1

    def test_closed_queue_returns_none(self):
        queue = WorkQueue.initialize([make_test("a")])
        queue.close()
        assert queue.closed
        assert queue.dequeue(0) is None
        assert len(queue) == 1

    def test_complete_without_dequeue_raises(self):
        queue = WorkQueue.initialize([make_test("a")])
        with pytest.raises(RuntimeError):
            queue.complete(make_test("a"))

    def test_dequeue_blocks_while_attempt_in_flight(self):
        a = make_test("a")
        queue = WorkQueue.initialize([a])
        taken = queue.dequeue(0)

        got = []
        waiter = threading.Thread(target=lambda: got.append(queue.dequeue(1)))
        waiter.start()
        time.sleep(0.05)
        assert waiter.is_alive()

        queue.requeue(taken)
        queue.complete(taken)
        waiter.join(timeout=2)

        assert not waiter.is_alive()
        assert got == [a]

    def test_waiter_released_when_last_attempt_completes(self):
        queue = WorkQueue.initialize([make_test("a")])
        taken = queue.dequeue(0)

        got = []
        waiter = threading.Thread(target=lambda: got.append(queue.dequeue(1)))
        waiter.start()
        time.sleep(0.05)
        queue.complete(taken)
        waiter.join(timeout=2)

        assert not waiter.is_alive()
        assert got == [None]

    def test_waiter_released_on_close(self):
        queue = WorkQueue.initialize([make_test("a")])
        queue.dequeue(0)

        got = []
        waiter = threading.Thread(target=lambda: got.append(queue.dequeue(1)))
        waiter.start()
        time.sleep(0.05)
        queue.close()
        waiter.join(timeout=2)

        assert not waiter.is_alive()
        assert got == [None]

    def test_concurrent_dequeue_hands_out_each_test_once(self):
        tests = [make_test(f"t{i}") for i in range(200)]
        queue = WorkQueue.initialize(tests)
        taken: list[Test] = []
        lock = threading.Lock()

        def worker(thread_id: int) -> None:
            while (test := queue.dequeue(thread_id)) is not None:
                with lock:
                    taken.append(test)
                queue.complete(test)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert len(taken) == 200
        assert {id(t) for t in taken} == {id(t) for t in tests}
