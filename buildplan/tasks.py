"""Named on-demand actions, including the built-in clean action."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from buildplan.errors import ConfigurationError, FilesystemError
from buildplan.layout import OutputLayout

logger = logging.getLogger(__name__)


CLEAN_TASK = "clean"


@dataclass
class Task:
    """An action the operator can invoke by name after configuration."""

    name: str
    action: Callable[[], None]
    description: str | None = None

    def run(self) -> None:
        logger.info(f"> Task :{self.name}")
        self.action()


class CleanAction:
    """Recursively deletes the layout's output base directory.

    Idempotent: a missing directory counts as already clean.
    """

    def __init__(self, layout: OutputLayout):
        self.layout = layout

    @property
    def target(self) -> Path:
        return self.layout.resolved_base

    def __call__(self) -> None:
        target = self.target
        project_dir = self.layout.project_dir

        if target == Path(target.anchor) or project_dir == target or target in project_dir.parents:
            raise FilesystemError(
                f"Refusing to delete {target}: it contains the project directory {project_dir}"
            )

        if not target.exists() and not target.is_symlink():
            logger.info(f"Nothing to clean, {target} does not exist")
            return

        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except FileNotFoundError:
            # Removed concurrently; the end state is what we want.
            return
        except OSError as e:
            raise FilesystemError(f"Could not delete {target}: {e}") from e

        logger.info(f"Deleted {target}")


class TaskRegistry:
    """Tasks by name, in registration order."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        name: str,
        action: Callable[[], None],
        description: str | None = None,
    ) -> Task:
        if not name or not name.strip():
            raise ConfigurationError("Task name must not be empty")
        if name in self._tasks:
            raise ConfigurationError(f"Task {name!r} is already registered")
        task = Task(name=name, action=action, description=description)
        self._tasks[name] = task
        return task

    def register_clean(self, layout: OutputLayout) -> Task:
        return self.register(
            CLEAN_TASK,
            CleanAction(layout),
            description=f"Deletes the build directory {layout.base}",
        )

    def get(self, name: str) -> Task:
        task = self._tasks.get(name)
        if task is None:
            available = ", ".join(self._tasks) or "(none)"
            raise ConfigurationError(f"Task {name!r} not found. Available tasks: {available}")
        return task

    def run(self, name: str) -> None:
        self.get(name).run()

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)
