"""Abstract base task with an enforced lifecycle.

Every concrete task inherits from BaseTask and implements only ``execute()``.
The ``run_task()`` wrapper is **not overridable** — it enforces:

    log start -> execute -> convert unexpected errors -> record -> log end

Errors from the crashforge taxonomy propagate unchanged so callers can
tell a missing manifest field from a failed upload.
"""

from __future__ import annotations

import abc
from datetime import datetime, timezone
from typing import Any, ClassVar, final

from crashforge.core.errors import CrashforgeError, TaskExecutionError
from crashforge.models.context import BuildContext

GROUP_NAME = "crashforge"


class BaseTask(abc.ABC):
    """Abstract base for all crashforge build tasks.

    Subclasses **must** implement:
        * ``task_id``      — unique identifier (e.g. ``"manifest_uuid"``).
        * ``display_name`` — human-readable name for log output.
        * ``execute(ctx)`` — the task's core logic.

    Subclasses **must not** override ``run_task()``.
    """

    group: ClassVar[str] = GROUP_NAME
    description: ClassVar[str] = ""

    @property
    @abc.abstractmethod
    def task_id(self) -> str:
        """Unique task identifier."""
        ...

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        ...

    @abc.abstractmethod
    def execute(self, ctx: BuildContext) -> dict[str, Any]:
        """Run the task and return a structured result dict."""
        ...

    @final
    def run_task(self, ctx: BuildContext) -> dict[str, Any]:
        """Execute the full task lifecycle.  **Do not override.**

        The result is stored in ``ctx.task_results[task_id]`` with a
        ``_completed_at`` timestamp.
        """
        logger = ctx.logger
        logger.info("%s [%s] starting", self.display_name, self.task_id)

        try:
            result = self.execute(ctx)
        except CrashforgeError as exc:
            logger.error(
                "%s [%s] failed: %s", self.display_name, self.task_id, exc
            )
            raise
        except Exception as exc:
            logger.error(
                "%s [%s] execution failed: %s",
                self.display_name,
                self.task_id,
                exc,
            )
            raise TaskExecutionError(
                f"Task {self.task_id} failed: {exc}"
            ) from exc

        result["_completed_at"] = datetime.now(timezone.utc).isoformat()
        ctx.task_results[self.task_id] = result
        logger.info("%s [%s] completed", self.display_name, self.task_id)
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} task_id={self.task_id!r}>"
