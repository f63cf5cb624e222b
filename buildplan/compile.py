"""Compile a ConfiguredBuild into Gradle Kotlin DSL scripts.

    build.gradle.kts      Repositories, plugin classpath, output layout, clean
    settings.gradle.kts   Root project name and included subprojects

The generated scripts are what the host build tool reads; use
`buildplan emit` to inspect them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from buildplan.plan import ConfiguredBuild
from buildplan.repositories import Repository, RepositorySet
from buildplan.tasks import CLEAN_TASK, CleanAction

logger = logging.getLogger(__name__)


_INDENT = "    "


def _kt_string(value: str) -> str:
    """Quote a value as a Kotlin string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


def _repository_line(repo: Repository) -> str:
    if repo.well_known:
        return f"{repo.name}()"
    return f"maven {{ url = uri({_kt_string(repo.url)}) }}"


def _repositories_block(repos: RepositorySet, depth: int) -> list[str]:
    pad = _INDENT * depth
    lines = [f"{pad}repositories {{"]
    for repo in repos:
        lines.append(f"{pad}{_INDENT}{_repository_line(repo)}")
    lines.append(f"{pad}}}")
    return lines


class GradleScriptCompiler:
    """Translates a ConfiguredBuild into build.gradle.kts and settings.gradle.kts."""

    def __init__(self, configured: ConfiguredBuild, output_dir: str | Path):
        self.configured = configured
        self.output = Path(output_dir)

    def compile(self) -> list[Path]:
        """Write all scripts and return their paths."""
        self.output.mkdir(parents=True, exist_ok=True)

        written = [
            self._write(self.output / "settings.gradle.kts", self.render_settings()),
            self._write(self.output / "build.gradle.kts", self.render_build()),
        ]
        return written

    def _write(self, path: Path, content: str) -> Path:
        path.write_text(content)
        logger.info(f"Wrote {path}")
        return path

    def render_settings(self) -> str:
        c = self.configured
        lines = [f"rootProject.name = {_kt_string(c.name)}"]
        if c.subprojects:
            lines.append("")
            paths = ", ".join(_kt_string(p.path) for p in c.subprojects)
            lines.append(f"include({paths})")

        for p in c.subprojects:
            rel = os.path.relpath(p.project_dir, c.root.project_dir)
            if Path(rel) != Path(p.name):
                lines.append(
                    f"project({_kt_string(p.path)}).projectDir = file({_kt_string(Path(rel).as_posix())})"
                )

        return "\n".join(lines) + "\n"

    def render_build(self) -> str:
        c = self.configured
        lines: list[str] = []

        # buildscript: plugin resolution
        lines.append("buildscript {")
        lines.extend(_repositories_block(c.buildscript_repositories, 1))
        lines.append(f"{_INDENT}dependencies {{")
        for dep in c.classpath:
            lines.append(f"{_INDENT * 2}classpath({_kt_string(dep.notation)})")
        lines.append(f"{_INDENT}}}")
        lines.append("}")
        lines.append("")

        # allprojects: dependency resolution
        lines.append("allprojects {")
        lines.extend(_repositories_block(c.repositories, 1))
        lines.append("}")
        lines.append("")

        # Output layout
        base = _kt_string(c.layout.base.as_posix())
        lines.append(f"val customBuildDir = rootProject.layout.projectDirectory.dir({base})")
        lines.append("rootProject.layout.buildDirectory.set(customBuildDir)")
        lines.append("")

        lines.append("subprojects {")
        for name in c.evaluated_first:
            path = _kt_string(f":{name}")
            lines.append(f"{_INDENT}if (project.path != {path}) {{")
            lines.append(f"{_INDENT * 2}evaluationDependsOn({path})")
            lines.append(f"{_INDENT}}}")
        lines.append(f"{_INDENT}layout.buildDirectory.set(customBuildDir.dir(project.name))")
        lines.append("}")

        for p in c.subprojects:
            if not p.depends_on:
                continue
            lines.append("")
            lines.append(f"project({_kt_string(p.path)}) {{")
            for dep in p.depends_on:
                lines.append(f"{_INDENT}evaluationDependsOn({_kt_string(':' + dep)})")
            lines.append("}")

        # Only the built-in clean action has a script equivalent.
        if CLEAN_TASK in c.tasks and isinstance(c.tasks.get(CLEAN_TASK).action, CleanAction):
            lines.append("")
            lines.append(f"tasks.register<Delete>({_kt_string(CLEAN_TASK)}) {{")
            lines.append(f"{_INDENT}delete(rootProject.layout.buildDirectory)")
            lines.append("}")

        skipped = [t.name for t in c.tasks if t.name != CLEAN_TASK]
        if skipped:
            logger.debug(f"Tasks without a script equivalent: {', '.join(skipped)}")

        return "\n".join(lines) + "\n"
