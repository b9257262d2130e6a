"""Crashforge build tasks — registry mapping task_id to task class.

Usage::

    from crashforge.tasks import get_task

    task = get_task("manifest_uuid", manifest_path=Path("AndroidManifest.xml"))
    result = task.run_task(ctx)

The upload task has two variants; ``get_task`` picks one from the
supplied ``HostCapabilities``.
"""

from __future__ import annotations

from typing import Any

from crashforge.tasks.base import GROUP_NAME, BaseTask
from crashforge.tasks.manifest_uuid import ManifestUuidTask
from crashforge.tasks.so_mapping import SoMappingTask
from crashforge.tasks.upload_source_map import (
    FileCollectionUploadTask,
    HostCapabilities,
    LegacyUploadTask,
    UploadJsSourceMapTask,
    create_upload_task,
    select_upload_task,
)

# ---------------------------------------------------------------------------
# Task registry: task_id -> task class
# ---------------------------------------------------------------------------

TASK_REGISTRY: dict[str, type[BaseTask]] = {
    "manifest_uuid": ManifestUuidTask,
    "so_mapping": SoMappingTask,
    "upload_js_source_map": UploadJsSourceMapTask,
}

# Order in which a full build runs them.
TASK_ORDER: list[str] = [
    "manifest_uuid",
    "so_mapping",
    "upload_js_source_map",
]


def get_task(
    task_id: str,
    capabilities: HostCapabilities | None = None,
    **kwargs: Any,
) -> BaseTask:
    """Instantiate a task by its ``task_id``.

    Raises ``KeyError`` if the task_id is not registered.
    """
    try:
        cls = TASK_REGISTRY[task_id]
    except KeyError:
        raise KeyError(
            f"Unknown task_id {task_id!r}. "
            f"Registered tasks: {sorted(TASK_REGISTRY.keys())}"
        ) from None
    if cls is UploadJsSourceMapTask:
        cls = select_upload_task(capabilities or HostCapabilities())
    return cls(**kwargs)


__all__ = [
    # Base
    "BaseTask",
    "GROUP_NAME",
    # Registry
    "TASK_REGISTRY",
    "TASK_ORDER",
    "get_task",
    # Concrete tasks
    "ManifestUuidTask",
    "SoMappingTask",
    "UploadJsSourceMapTask",
    "FileCollectionUploadTask",
    "LegacyUploadTask",
    # Variant selection
    "HostCapabilities",
    "select_upload_task",
    "create_upload_task",
]
