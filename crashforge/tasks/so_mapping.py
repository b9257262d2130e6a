"""SO mapping task — symbol files for every discovered shared object."""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from crashforge.core.so_mapping import SharedObjectMappingFactory, find_shared_objects
from crashforge.models.context import BuildContext
from crashforge.models.toolchain import ToolInvocationParams
from crashforge.tasks.base import BaseTask


class SoMappingTask(BaseTask):
    """Runs objdump over ``<search_dir>/<abi>/*.so``.

    A failing architecture is reported in ``failed`` and does not stop
    the others.
    """

    description: ClassVar[str] = "Generates NDK symbol mapping files"

    def __init__(
        self,
        search_dir: Path,
        output_dir: Path | None = None,
        factory: SharedObjectMappingFactory | None = None,
    ) -> None:
        self.search_dir = search_dir
        self.output_dir = output_dir
        self._factory = factory or SharedObjectMappingFactory()

    @property
    def task_id(self) -> str:
        return "so_mapping"

    @property
    def display_name(self) -> str:
        return "SO Mapping"

    def execute(self, ctx: BuildContext) -> dict[str, Any]:
        output_dir = self.output_dir or ctx.config.so_mapping_dir
        shared_objects = find_shared_objects(self.search_dir)
        if not shared_objects:
            ctx.logger.warning(
                "crashforge: no shared objects found under %s", self.search_dir
            )

        generated: list[str] = []
        failed: list[str] = []
        for shared_object, arch in shared_objects:
            params = ToolInvocationParams(
                shared_object=shared_object,
                architecture=arch,
                path_overrides=ctx.config.objdump_paths,
                output_directory=output_dir,
            )
            output = self._factory.generate_so_mapping_file(params, ctx)
            if output is None:
                failed.append(f"{arch}/{shared_object.name}")
            else:
                generated.append(str(output))

        return {
            "output_dir": str(output_dir),
            "generated": generated,
            "failed": failed,
        }
