"""Build-time tool dependencies (the plugin classpath)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from buildplan.errors import ConfigurationError

logger = logging.getLogger(__name__)


_VERSION_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z.+_-]*$")


@dataclass(frozen=True)
class ToolDependency:
    """A plugin or build-time tool loaded before any project code runs.

    The coordinate is usually "group:artifact" (the host's Maven form) but
    any non-empty identifier without whitespace is accepted.
    """

    coordinate: str
    version: str

    def __post_init__(self) -> None:
        if not isinstance(self.coordinate, str) or not isinstance(self.version, str):
            raise ConfigurationError(
                f"Tool dependency coordinate and version must be strings, "
                f"got {self.coordinate!r} and {self.version!r}"
            )
        if not self.coordinate or not self.coordinate.strip():
            raise ConfigurationError("Tool dependency coordinate must not be empty")
        if any(c.isspace() for c in self.coordinate):
            raise ConfigurationError(
                f"Tool dependency coordinate {self.coordinate!r} must not contain whitespace"
            )
        if self.coordinate.startswith(":") or self.coordinate.endswith(":"):
            raise ConfigurationError(f"Malformed tool dependency coordinate {self.coordinate!r}")
        if not _VERSION_RE.match(self.version or ""):
            raise ConfigurationError(
                f"Malformed version {self.version!r} for tool dependency {self.coordinate!r}"
            )

    @classmethod
    def parse(cls, notation: str) -> ToolDependency:
        """Parse the compact "group:artifact:version" notation.

            ToolDependency.parse("com.android.tools.build:gradle:8.7.3")
        """
        if not isinstance(notation, str):
            raise ConfigurationError(f"Expected 'group:artifact:version', got {notation!r}")
        parts = notation.strip().split(":")
        if len(parts) < 3 or not all(parts):
            raise ConfigurationError(
                f"Expected 'group:artifact:version', got {notation!r}"
            )
        return cls(coordinate=":".join(parts[:-1]), version=parts[-1])

    @property
    def notation(self) -> str:
        return f"{self.coordinate}:{self.version}"


def _coerce(dep: str | ToolDependency | tuple[str, str]) -> ToolDependency:
    if isinstance(dep, ToolDependency):
        return dep
    if isinstance(dep, tuple):
        if len(dep) != 2:
            raise ConfigurationError(
                f"Expected a (coordinate, version) pair, got {len(dep)} item(s): {dep!r}"
            )
        coordinate, version = dep
        return ToolDependency(coordinate, version)
    return ToolDependency.parse(dep)


class Classpath:
    """Ordered list of tool dependencies. Open-ended: add as many as needed."""

    def __init__(self) -> None:
        self._deps: list[ToolDependency] = []

    def extend(self, deps: Iterable[str | ToolDependency | tuple[str, str]]) -> None:
        """Register a batch of dependencies.

        The whole batch is validated first; on any error nothing from it is
        registered.
        """
        batch = [_coerce(d) for d in deps]

        versions = {d.coordinate: d.version for d in self._deps}
        accepted: list[ToolDependency] = []
        for dep in batch:
            existing = versions.get(dep.coordinate)
            if existing is None:
                versions[dep.coordinate] = dep.version
                accepted.append(dep)
            elif existing != dep.version:
                raise ConfigurationError(
                    f"Conflicting versions for {dep.coordinate!r}: {existing} and {dep.version}"
                )

        self._deps.extend(accepted)
        for dep in accepted:
            logger.debug(f"Added classpath entry {dep.notation}")

    def __iter__(self) -> Iterator[ToolDependency]:
        return iter(self._deps)

    def __len__(self) -> int:
        return len(self._deps)

    def __repr__(self) -> str:
        return f"Classpath({[d.notation for d in self._deps]!r})"
