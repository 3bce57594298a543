"""Unit tests for logging context module."""

import logging
import threading

from ffmpegbox.logging.context import (
    TaskContextFilter,
    get_task_context,
    task_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="ffmpegbox.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="message",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestTaskContextManager:
    """Tests for task_context context manager."""

    def test_default_context_is_none(self) -> None:
        """Outside any task both values are None."""
        assert get_task_context() == (None, None)

    def test_sets_and_restores(self) -> None:
        """Values are set on entry and restored on exit."""
        with task_context("t1", "alpha"):
            assert get_task_context() == ("t1", "alpha")
        assert get_task_context() == (None, None)

    def test_nested(self) -> None:
        """Nested contexts restore the outer task."""
        with task_context("outer", "alpha"):
            with task_context("inner"):
                assert get_task_context() == ("inner", None)
            assert get_task_context() == ("outer", "alpha")

    def test_restored_after_exception(self) -> None:
        """The context is reset even if the body raises."""
        try:
            with task_context("t1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_task_context() == (None, None)

    def test_thread_isolation(self) -> None:
        """Each thread sees only its own task."""
        seen: dict[str, tuple] = {}

        def worker(task_id: str) -> None:
            with task_context(task_id):
                seen[task_id] = get_task_context()

        threads = [threading.Thread(target=worker, args=(f"t{i}",)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert seen == {f"t{i}": (f"t{i}", None) for i in range(4)}
        assert get_task_context() == (None, None)


class TestTaskContextFilter:
    """Tests for TaskContextFilter."""

    def test_injects_context(self) -> None:
        """Records inside a task carry its id, client and tag."""
        record = _record()
        with task_context("t1", "alpha"):
            assert TaskContextFilter().filter(record) is True

        assert record.task_id == "t1"
        assert record.client_name == "alpha"
        assert record.task_tag == "[t1] "

    def test_no_context(self) -> None:
        """Outside a task the tag is empty."""
        record = _record()
        TaskContextFilter().filter(record)

        assert record.task_id is None
        assert record.task_tag == ""

    def test_explicit_extra_wins(self) -> None:
        """Values passed via extra are not overwritten."""
        record = _record(task_id="explicit")
        with task_context("t1"):
            TaskContextFilter().filter(record)

        assert record.task_id == "explicit"
        assert record.task_tag == "[explicit] "
