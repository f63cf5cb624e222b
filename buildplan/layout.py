"""Shared build output layout for a root project and its subprojects."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from buildplan.errors import ConfigurationError


# Where a project writes output when no layout relocates it.
DEFAULT_OUTPUT_DIRNAME = "build"


def default_output_dir(project_dir: str | Path) -> Path:
    return Path(project_dir) / DEFAULT_OUTPUT_DIRNAME


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(path)))


def check_project_name(name: str) -> None:
    """Reject names that would escape or collapse the per-project directory."""
    if not name or not name.strip():
        raise ConfigurationError("Subproject name must not be empty")
    if name in (".", ".."):
        raise ConfigurationError(f"Invalid subproject name {name!r}")
    seps = {"/", "\\", os.sep}
    if os.altsep:
        seps.add(os.altsep)
    if any(s in name for s in seps):
        raise ConfigurationError(f"Subproject name {name!r} must not contain path separators")


@dataclass(frozen=True)
class OutputLayout:
    """Output base directory plus the base/<projectName> rule for subprojects.

    base is kept as declared (e.g. "../../build") and is interpreted
    relative to project_dir, the root project's directory.
    """

    base: Path
    project_dir: Path

    @classmethod
    def create(cls, base: str | Path, project_dir: str | Path = ".") -> OutputLayout:
        if base is None or not str(base).strip():
            raise ConfigurationError("Output base path must not be empty")
        return cls(base=Path(base), project_dir=_normalize(Path(project_dir)))

    @property
    def resolved_base(self) -> Path:
        return _normalize(self.project_dir / self.base)

    def for_project(self, name: str) -> Path:
        """Output directory of subproject `name`, relative to the root project."""
        check_project_name(name)
        return self.base / name

    def resolved_for(self, name: str) -> Path:
        """Absolute output directory of subproject `name`."""
        check_project_name(name)
        return self.resolved_base / name
