"""
Unit tests for the main context.
"""

import threading

import pytest

from aboutui.core.main_context import MainContext
from aboutui.errors import WrongContextError


class TestAffinity:
    """Tests for is_current() and check_current()."""

    def test_not_current_outside_loop(self, main):
        assert not main.is_current()
        with pytest.raises(WrongContextError):
            main.check_current("test")

    def test_current_inside_loop(self, main):
        seen = []
        main.post(lambda: seen.append(main.is_current()))
        main.run_until_idle()
        assert seen == [True]

    def test_ownership_released(self, main):
        main.run_until_idle()
        assert not main.is_current()

    def test_dedicated_thread_owns_context(self):
        """Test tasks run on the dedicated thread once started."""
        main = MainContext(name="worker-test")
        main.start()
        try:
            done = threading.Event()
            seen = {}

            def probe():
                seen["current"] = main.is_current()
                seen["thread"] = threading.current_thread().name
                done.set()

            main.post(probe)
            assert done.wait(2.0)
            assert seen == {"current": True, "thread": "worker-test-context"}
            assert not main.is_current()
        finally:
            main.stop()
        assert not main.is_running

    def test_caller_loop_rejected_while_thread_owns(self):
        main = MainContext()
        main.start()
        try:
            with pytest.raises(RuntimeError):
                main.run_until_idle()
        finally:
            main.stop()


class TestScheduling:
    """Tests for post(), call() and the caller-driven loop."""

    def test_post_always_defers(self, main):
        """Test post() from the main context does not run inline."""
        order = []

        def outer():
            main.post(order.append, "posted")
            order.append("outer")

        main.post(outer)
        assert main.run_until_idle() == 2
        assert order == ["outer", "posted"]

    def test_call_runs_inline_on_main(self, main):
        order = []

        def outer():
            main.call(order.append, "called")
            order.append("outer")

        main.post(outer)
        main.run_until_idle()
        assert order == ["called", "outer"]

    def test_call_posts_off_main(self, main):
        order = []
        main.call(order.append, "called")
        assert order == []
        assert main.pending == 1
        main.run_until_idle()
        assert order == ["called"]

    def test_fifo(self, main):
        order = []
        for i in range(5):
            main.post(order.append, i)
        main.run_until_idle()
        assert order == [0, 1, 2, 3, 4]

    def test_run_until_timeout(self, main):
        assert main.run_until(lambda: False, timeout=0.05) is False

    def test_run_until_waits_for_other_threads(self, main):
        """Test run_until picks up tasks posted later from another thread."""
        flag = []
        timer = threading.Timer(0.05, main.post, args=(flag.append, True))
        timer.start()
        assert main.run_until(lambda: bool(flag), timeout=2.0)
        timer.join()

    def test_nested_run(self, main):
        """Test a task may drive the loop again without losing ownership."""
        order = []

        def outer():
            main.post(order.append, "inner")
            main.run_until(lambda: "inner" in order, timeout=1.0)
            order.append("outer")
            order.append(main.is_current())

        main.post(outer)
        main.run_until_idle()
        assert order == ["inner", "outer", True]

    def test_failing_task_does_not_stop_loop(self, main):
        order = []

        def boom():
            raise ValueError("boom")

        main.post(boom)
        main.post(order.append, "after")
        main.run_until_idle()

        assert order == ["after"]
        assert main.tasks_failed == 1
        assert main.tasks_run == 1

    def test_stop_drains_queued_tasks(self):
        main = MainContext()
        main.start()
        order = []
        for i in range(3):
            main.post(order.append, i)
        main.stop()
        assert order == [0, 1, 2]
