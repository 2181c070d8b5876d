# Internal
import unittest
from asyncio import get_running_loop

# External
from vow import (
    State,
    LoopScheduler,
    ManualScheduler,
    NoSchedulerError,
    get_scheduler,
    set_scheduler,
    create_deferred,
)

VALUES = (None, 0, "", "value", [1, 2], object())


class TestManualScheduler(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        set_scheduler(self.scheduler)

    def tearDown(self):
        set_scheduler(None)

    def test_never_synchronous_on_resolved(self):
        calls = []
        d = create_deferred()
        d.resolve(1)
        self.scheduler.drain()

        d.promise.chain(calls.append)
        self.assertEqual(calls, [])

        self.scheduler.drain()
        self.assertEqual(calls, [1])

    def test_never_synchronous_on_rejected(self):
        calls = []
        d = create_deferred()
        d.reject("boom")
        d.promise.chain(None, calls.append)

        self.assertEqual(calls, [])

        self.scheduler.drain()
        self.assertEqual(calls, ["boom"])

    def test_never_synchronous_on_settlement(self):
        calls = []
        d = create_deferred()
        d.promise.chain(calls.append)

        d.resolve(1)
        self.assertEqual(calls, [])
        self.assertEqual(len(self.scheduler), 1)

        self.assertEqual(self.scheduler.run_once(), 1)
        self.assertEqual(calls, [1])

    def test_observer_order(self):
        calls = []
        d = create_deferred()
        for name in ("a", "b", "c"):
            d.promise.chain(lambda _, name=name: calls.append(name))

        d.resolve(None)
        d.promise.chain(lambda _: calls.append("d"))
        self.scheduler.drain()

        self.assertEqual(calls, ["a", "b", "c", "d"])

    def test_rejection_observer_order(self):
        calls = []
        d = create_deferred()
        d.promise.chain(None, lambda _: calls.append("a"))
        d.promise.always(lambda: calls.append("b"))
        d.promise.chain(None, lambda _: calls.append("c"))

        d.reject(RuntimeError())
        self.scheduler.drain()

        self.assertEqual(calls, ["a", "b", "c"])

    def test_pass_through_resolution(self):
        for value in VALUES:
            with self.subTest(value=value):
                rejected = []
                d = create_deferred()
                derived = d.promise.chain(None, rejected.append)

                d.resolve(value)
                self.scheduler.drain()

                self.assertIs(derived.state, State.RESOLVED)
                self.assertIs(derived.value, value)
                self.assertEqual(rejected, [])

    def test_pass_through_rejection(self):
        for reason in VALUES + (RuntimeError(),):
            with self.subTest(reason=reason):
                resolved = []
                d = create_deferred()
                derived = d.promise.chain(resolved.append)

                d.reject(reason)
                self.scheduler.drain()

                self.assertIs(derived.state, State.REJECTED)
                self.assertIs(derived.reason, reason)
                self.assertEqual(resolved, [])

    def test_run_once_defers_new_tasks(self):
        calls = []
        d = create_deferred()
        d.promise.chain(lambda v: calls.append("first") or v).chain(
            lambda _: calls.append("second")
        )

        d.resolve(1)
        self.scheduler.run_once()
        self.assertEqual(calls, ["first"])

        self.scheduler.run_once()
        self.assertEqual(calls, ["first", "second"])

    def test_drain_count(self):
        d = create_deferred()
        d.promise.then(lambda v: v).then(lambda v: v)

        d.resolve(1)
        self.assertEqual(self.scheduler.drain(), 2)
        self.assertEqual(self.scheduler.drain(), 0)

    def test_drain_limit(self):
        def again():
            self.scheduler.call_soon(again)

        self.scheduler.call_soon(again)

        with self.assertRaises(RuntimeError):
            self.scheduler.drain(limit=5)

    def test_call_soon_arguments(self):
        calls = []
        self.scheduler.call_soon(calls.append, 1)
        self.scheduler.call_soon(lambda: calls.append(2))

        self.assertEqual(calls, [])
        self.scheduler.drain()
        self.assertEqual(calls, [1, 2])

    def test_explicit_scheduler_inherited(self):
        other = ManualScheduler()
        d = create_deferred(scheduler=other)
        derived = d.promise.then(lambda v: v * 2).always()

        self.assertIs(derived.scheduler, other)

        d.resolve(2)
        self.assertEqual(self.scheduler.drain(), 0)
        self.assertTrue(derived.is_pending())

        other.drain()
        self.assertEqual(derived.value, 4)

    def test_no_scheduler(self):
        set_scheduler(None)

        with self.assertRaises(NoSchedulerError):
            create_deferred()

    def test_set_scheduler_type_check(self):
        with self.assertRaises(TypeError):
            set_scheduler(object())


class TestLoopScheduler(unittest.IsolatedAsyncioTestCase):
    async def test_running_loop_scheduler(self):
        scheduler = get_scheduler()

        self.assertIsInstance(scheduler, LoopScheduler)
        self.assertIs(scheduler.loop, get_running_loop())
        self.assertIs(get_scheduler(), scheduler)
        self.assertIs(create_deferred().promise.scheduler, scheduler)

    async def test_installed_scheduler_wins(self):
        manual = ManualScheduler()
        set_scheduler(manual)
        try:
            self.assertIs(get_scheduler(), manual)
        finally:
            set_scheduler(None)

    async def test_call_soon_from_thread(self):
        loop = get_running_loop()
        fut = loop.create_future()
        scheduler = LoopScheduler()

        await loop.run_in_executor(None, scheduler.call_soon, fut.set_result, 10)

        self.assertEqual(await fut, 10)

    async def test_resolve_from_thread(self):
        loop = get_running_loop()
        d = create_deferred()
        doubled = d.promise.then(lambda x: x * 2)

        self.assertTrue(await loop.run_in_executor(None, d.resolve, 10))
        self.assertEqual(await doubled, 20)


if __name__ == "__main__":
    unittest.main()
