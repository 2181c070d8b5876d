# Internal
import unittest

# External
from vow import (
    ManualScheduler,
    race,
    gather,
    set_scheduler,
    create_deferred,
    set_exception_handler,
)


class TestPromiseCombinators(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        set_scheduler(self.scheduler)

        self.contexts = []
        set_exception_handler(self.contexts.append)

    def tearDown(self):
        set_exception_handler(None)
        set_scheduler(None)

    def test_gather_keeps_input_order(self):
        deferreds = [create_deferred() for _ in range(3)]
        combined = gather(d.promise for d in deferreds)

        deferreds[2].resolve("c")
        deferreds[0].resolve("a")
        self.scheduler.drain()
        self.assertTrue(combined.is_pending())

        deferreds[1].resolve("b")
        self.scheduler.drain()

        self.assertEqual(combined.value, ["a", "b", "c"])
        self.assertEqual(self.contexts, [])

    def test_gather_first_rejection(self):
        first = create_deferred()
        second = create_deferred()
        combined = gather([first.promise, second.promise])
        combined.catch(lambda _: None)

        second.reject("second")
        first.reject("first")
        self.scheduler.drain()

        self.assertEqual(combined.reason, "second")
        self.assertEqual(self.contexts, [])

    def test_gather_empty(self):
        combined = gather([])

        self.assertEqual(combined.value, [])

    def test_gather_inherits_scheduler(self):
        other = ManualScheduler()
        d = create_deferred(scheduler=other)

        combined = gather([d.promise])

        self.assertIs(combined.scheduler, other)

    def test_race_first_wins(self):
        slow = create_deferred()
        fast = create_deferred()
        winner = race([slow.promise, fast.promise])

        fast.resolve("fast")
        self.scheduler.drain()
        slow.resolve("slow")
        self.scheduler.drain()

        self.assertEqual(winner.value, "fast")

    def test_race_rejection(self):
        work = create_deferred()
        timer = create_deferred()
        winner = race([work.promise, timer.promise]).catch(lambda reason: reason)

        timer.reject("timeout")
        self.scheduler.drain()
        work.resolve("late")
        self.scheduler.drain()

        self.assertEqual(winner.value, "timeout")
        self.assertEqual(self.contexts, [])

    def test_race_empty(self):
        winner = race([])

        self.scheduler.drain()
        self.assertTrue(winner.is_pending())


if __name__ == "__main__":
    unittest.main()
