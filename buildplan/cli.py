"""CLI entry point for buildplan."""

from __future__ import annotations

import argparse
import importlib.machinery
import importlib.util
import logging
import os
import sys
from pathlib import Path

from buildplan.compile import GradleScriptCompiler
from buildplan.errors import ConfigurationError, FilesystemError
from buildplan.plan import BuildPlan, ConfiguredBuild

logger = logging.getLogger(__name__)


DEFAULT_BUILDFILE = "Buildfile"


def load_buildfile(path: str | Path) -> BuildPlan:
    """Load and evaluate a Buildfile, returning its BuildPlan.

    A relative project_dir in the Buildfile is taken relative to the
    Buildfile's own directory.
    """
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigurationError(f"{path} not found")

    # Buildfiles have no .py suffix, so name the loader explicitly.
    loader = importlib.machinery.SourceFileLoader("buildfile", path)
    spec = importlib.util.spec_from_loader("buildfile", loader)
    if spec is None:
        raise ConfigurationError(f"could not load {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["buildfile"] = module
    loader.exec_module(module)

    plans = [v for v in vars(module).values() if isinstance(v, BuildPlan)]
    if not plans:
        raise ConfigurationError(f"no BuildPlan object found in {path}")

    if len(plans) > 1:
        logger.warning(f"multiple BuildPlan objects in {path}, using the first one")

    plan = plans[0]
    if not plan.project_dir.is_absolute():
        plan.project_dir = Path(os.path.dirname(path)) / plan.project_dir
    return plan


def _configure(args: argparse.Namespace) -> ConfiguredBuild:
    plan = load_buildfile(args.file)
    return plan.configure(build_dir=args.build_dir)


def cmd_inspect(args: argparse.Namespace) -> None:
    """Show the configured build without running anything."""
    c = _configure(args)

    print(f"Build: {c.name}")
    print(f"Project dir: {c.root.project_dir}")
    print(f"Repositories: {c.repositories.names}")
    print(f"Buildscript repositories: {c.buildscript_repositories.names}")
    print(f"Classpath: {[d.notation for d in c.classpath]}")
    print(f"Output base: {c.layout.base} ({c.layout.resolved_base})")
    print("Projects:")
    print(f"  {c.root.path:<12} {c.root.output_dir}")
    for p in c.subprojects:
        print(f"  {p.path:<12} {p.output_dir}")
    print(f"Tasks: {[t.name for t in c.tasks]}")


def cmd_tasks(args: argparse.Namespace) -> None:
    """List the tasks that can be run."""
    c = _configure(args)
    for task in c.tasks:
        desc = f" - {task.description}" if task.description else ""
        print(f"{task.name}{desc}")


def cmd_run(args: argparse.Namespace) -> None:
    """Run one or more tasks in the order given."""
    c = _configure(args)
    # Resolve every name before running anything.
    tasks = [c.tasks.get(name) for name in args.tasks]
    for task in tasks:
        task.run()


def cmd_clean(args: argparse.Namespace) -> None:
    """Delete the build output directory."""
    c = _configure(args)
    c.clean()


def cmd_emit(args: argparse.Namespace) -> None:
    """Write the equivalent Gradle scripts to a directory."""
    c = _configure(args)
    written = GradleScriptCompiler(c, args.output).compile()
    for path in written:
        print(path)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-f", "--file",
        default=os.environ.get("BUILDPLAN_FILE", DEFAULT_BUILDFILE),
        help="Path to the Buildfile (default: $BUILDPLAN_FILE or ./Buildfile)",
    )
    p.add_argument(
        "--build-dir",
        default=os.environ.get("BUILDPLAN_BUILD_DIR"),
        help="Override the output base directory (default: $BUILDPLAN_BUILD_DIR)",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="buildplan",
        description="buildplan: declarative multi-project build descriptors",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # buildplan inspect
    inspect_p = sub.add_parser("inspect", help="Show the configured build")
    _add_common(inspect_p)
    inspect_p.set_defaults(func=cmd_inspect)

    # buildplan tasks
    tasks_p = sub.add_parser("tasks", help="List available tasks")
    _add_common(tasks_p)
    tasks_p.set_defaults(func=cmd_tasks)

    # buildplan run
    run_p = sub.add_parser("run", help="Run tasks by name")
    run_p.add_argument("tasks", nargs="+", help="Task names")
    _add_common(run_p)
    run_p.set_defaults(func=cmd_run)

    # buildplan clean
    clean_p = sub.add_parser("clean", help="Delete the build output directory")
    _add_common(clean_p)
    clean_p.set_defaults(func=cmd_clean)

    # buildplan emit
    emit_p = sub.add_parser("emit", help="Write equivalent Gradle Kotlin DSL scripts")
    emit_p.add_argument("-o", "--output", required=True, help="Directory to write the scripts to")
    _add_common(emit_p)
    emit_p.set_defaults(func=cmd_emit)

    args = parser.parse_args(argv)

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        args.func(args)
    except (ConfigurationError, FilesystemError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
