"""BuildPlan: the root object of a Buildfile.

A plan is configured in two phases. Phase 1 configures the root project
and computes the OutputLayout. Phase 2 configures each subproject in
evaluation order and hands it that layout explicitly, so no subproject can
observe the output directory before it has been relocated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable

from buildplan.classpath import Classpath, ToolDependency
from buildplan.errors import ConfigurationError
from buildplan.layout import OutputLayout, DEFAULT_OUTPUT_DIRNAME, check_project_name
from buildplan.repositories import Repository, RepositorySet
from buildplan.tasks import CLEAN_TASK, CleanAction, Task, TaskRegistry

logger = logging.getLogger(__name__)


ProjectHook = Callable[["Project", OutputLayout], None]


@dataclass
class Project:
    """A configured project (the root or one subproject)."""

    name: str
    path: str  # host-style path, ":" for the root and ":name" for subprojects
    project_dir: Path
    output_dir: Path
    repositories: RepositorySet
    depends_on: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class _SubprojectDecl:
    name: str
    configure: ProjectHook | None
    depends_on: list[str]
    project_dir: Path | None


@dataclass
class _TaskDecl:
    name: str
    action: Callable[[], None]
    description: str | None


def _strip_path(name: str) -> str:
    # Accept the host's ":app" form as well as "app".
    return name[1:] if name.startswith(":") else name


class BuildPlan:
    """Declarative description of a multi-project build.

    Usage in a Buildfile:

        plan = BuildPlan("android")
        plan.repositories("google", "mavenCentral")
        plan.classpath("com.android.tools.build:gradle:8.7.3")
        plan.output_layout("../../build")
        plan.subproject("app")
    """

    def __init__(self, name: str, project_dir: str | Path = "."):
        if not name or not name.strip():
            raise ConfigurationError("BuildPlan name must not be empty")
        self.name = name
        self.project_dir = Path(project_dir)

        self._repositories = RepositorySet()
        self._buildscript_repositories = RepositorySet()
        # Buildscript sources copied in by repositories(), not declared there directly.
        self._mirrored: set[str] = set()
        self._classpath = Classpath()
        self._layout_base: Path | None = None
        self._subprojects: dict[str, _SubprojectDecl] = {}
        self._subproject_hooks: list[ProjectHook] = []
        self._evaluate_first: list[str] = []
        self._tasks: list[_TaskDecl] = []
        self._clean_requested = False

    # --- Repositories ---

    def repositories(self, *repos: str | Repository) -> RepositorySet:
        """Register sources for the root project and every subproject.

        The same sources are also used to resolve classpath entries.
        """
        self._repositories.extend(repos)
        extra = [r for r in self._repositories if r.name not in self._buildscript_repositories]
        self._buildscript_repositories.extend(extra)
        self._mirrored.update(r.name for r in extra)
        return self._repositories

    def buildscript_repositories(self, *repos: str | Repository) -> RepositorySet:
        """Register sources used only for resolving classpath entries.

        Naming a source already mirrored in by repositories() adopts it
        instead of declaring it twice; repeating a name within this scope
        is still an error.
        """
        batch: list[str | Repository] = []
        adopted: set[str] = set()
        for repo in repos:
            name = repo.name if isinstance(repo, Repository) else repo
            if name in self._mirrored and name not in adopted:
                adopted.add(name)
                continue
            batch.append(repo)

        self._buildscript_repositories.extend(batch)
        self._mirrored -= adopted
        return self._buildscript_repositories

    # --- Classpath ---

    def classpath(self, *deps: str | ToolDependency | tuple[str, str]) -> None:
        """Add build-time tool dependencies ("group:artifact:version" or ToolDependency)."""
        self._classpath.extend(deps)

    # --- Output layout ---

    def output_layout(self, base: str | Path) -> OutputLayout:
        """Relocate build output to `base` and each subproject's to `base/<name>`."""
        if self._layout_base is not None:
            raise ConfigurationError(
                f"Output layout is already set to {str(self._layout_base)!r}"
            )
        layout = OutputLayout.create(base, self.project_dir)
        self._layout_base = layout.base
        return layout

    # --- Subprojects ---

    def subproject(
        self,
        name: str,
        configure: ProjectHook | None = None,
        depends_on: Iterable[str] = (),
        project_dir: str | Path | None = None,
    ) -> None:
        name = _strip_path(name)
        check_project_name(name)
        if name in self._subprojects:
            raise ConfigurationError(f"Subproject {name!r} is declared more than once")
        self._subprojects[name] = _SubprojectDecl(
            name=name,
            configure=configure,
            depends_on=[_strip_path(d) for d in depends_on],
            project_dir=Path(project_dir) if project_dir is not None else None,
        )

    def subprojects(self, hook: ProjectHook) -> ProjectHook:
        """Register a hook applied to every subproject. Usable as a decorator."""
        self._subproject_hooks.append(hook)
        return hook

    def evaluation_depends_on(self, *names: str) -> None:
        """Evaluate the named subprojects before every other subproject."""
        for name in names:
            name = _strip_path(name)
            if name not in self._evaluate_first:
                self._evaluate_first.append(name)

    # --- Tasks ---

    def task(
        self,
        name: str,
        action: Callable[[], None],
        description: str | None = None,
    ) -> None:
        if any(t.name == name for t in self._tasks):
            raise ConfigurationError(f"Task {name!r} is already registered")
        self._tasks.append(_TaskDecl(name=name, action=action, description=description))

    def register_clean(self) -> None:
        """Register the clean task. configure() does this if nothing else claims the name."""
        self._clean_requested = True

    # --- Configuration ---

    def configure(self, build_dir: str | Path | None = None) -> ConfiguredBuild:
        """Run the configuration pass.

        build_dir overrides the declared output base. Any error aborts the
        whole pass and nothing is returned.
        """
        # Phase 1: root project and layout.
        base = build_dir if build_dir is not None else self._layout_base
        layout = OutputLayout.create(
            base if base is not None else DEFAULT_OUTPUT_DIRNAME, self.project_dir
        )
        root = Project(
            name=self.name,
            path=":",
            project_dir=layout.project_dir,
            output_dir=layout.base,
            repositories=self._repositories.copy(),
        )
        logger.info(f"Configuring root project '{self.name}' (output: {layout.base})")

        # Phase 2: subprojects, with the layout passed in.
        subprojects: list[Project] = []
        for name in self._evaluation_order():
            decl = self._subprojects[name]
            project = Project(
                name=name,
                path=f":{name}",
                project_dir=layout.project_dir / (decl.project_dir or Path(name)),
                output_dir=layout.for_project(name),
                repositories=self._repositories.copy(),
                depends_on=list(decl.depends_on),
            )
            for hook in self._subproject_hooks:
                hook(project, layout)
            if decl.configure is not None:
                decl.configure(project, layout)
            logger.info(f"Configured project '{project.path}' (output: {project.output_dir})")
            subprojects.append(project)

        tasks = TaskRegistry()
        for decl in self._tasks:
            tasks.register(decl.name, decl.action, decl.description)
        if self._clean_requested or CLEAN_TASK not in tasks:
            tasks.register_clean(layout)

        return ConfiguredBuild(
            name=self.name,
            repositories=self._repositories.copy(),
            buildscript_repositories=self._buildscript_repositories.copy(),
            classpath=list(self._classpath),
            layout=layout,
            root=root,
            subprojects=subprojects,
            tasks=tasks,
            evaluated_first=list(self._evaluate_first),
        )

    def _evaluation_order(self) -> list[str]:
        """Subproject names, dependencies first.

        evaluation_depends_on() names come first, then the rest in
        declaration order. Each project's depends_on entries precede it.
        """
        for name in self._evaluate_first:
            if name not in self._subprojects:
                raise ConfigurationError(f"evaluation_depends_on: unknown subproject {name!r}")

        order: list[str] = []
        done: set[str] = set()
        visiting: list[str] = []

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                cycle = " -> ".join(visiting[visiting.index(name):] + [name])
                raise ConfigurationError(f"Subproject evaluation cycle: {cycle}")
            decl = self._subprojects.get(name)
            if decl is None:
                raise ConfigurationError(
                    f"Subproject {visiting[-1]!r} depends on unknown subproject {name!r}"
                )
            visiting.append(name)
            for dep in decl.depends_on:
                visit(dep)
            visiting.pop()
            done.add(name)
            order.append(name)

        for name in self._evaluate_first:
            visit(name)
        for name in self._subprojects:
            visit(name)
        return order


@dataclass
class ConfiguredBuild:
    """Flat, fully configured build. Produced once by BuildPlan.configure()."""

    name: str
    repositories: RepositorySet
    buildscript_repositories: RepositorySet
    classpath: list[ToolDependency]
    layout: OutputLayout
    root: Project
    subprojects: list[Project]
    tasks: TaskRegistry
    evaluated_first: list[str] = field(default_factory=list)

    def project(self, name: str) -> Project:
        """Look up a project by path (":" or ":app") or by bare name.

        Paths only match subprojects; a bare name falls back to the root
        when no subproject has it.
        """
        if name in ("", ":"):
            return self.root
        for p in self.subprojects:
            if p.name == _strip_path(name):
                return p
        if not name.startswith(":") and name == self.root.name:
            return self.root
        raise ConfigurationError(f"Project {name!r} not found")

    @property
    def clean_action(self) -> CleanAction:
        task: Task = self.tasks.get(CLEAN_TASK)
        if not isinstance(task.action, CleanAction):
            raise ConfigurationError(f"Task {CLEAN_TASK!r} is not the built-in clean action")
        return task.action

    def run(self, task: str) -> None:
        self.tasks.run(task)

    def clean(self) -> None:
        self.run(CLEAN_TASK)
