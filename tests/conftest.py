from __future__ import annotations

from pathlib import Path

import pytest

from buildplan import BuildPlan


@pytest.fixture
def android_dir(tmp_path: Path) -> Path:
    """A project root two levels below tmp_path, so "../../build" stays inside it."""
    d = tmp_path / "flutter_app" / "android"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def android_plan(android_dir: Path) -> BuildPlan:
    plan = BuildPlan("android", project_dir=android_dir)
    plan.repositories("google", "mavenCentral")
    plan.classpath(
        ("android-gradle-plugin", "8.7.3"),
        ("kotlin-plugin", "2.1.0"),
    )
    plan.output_layout("../../build")
    plan.subproject("app")
    plan.subproject("lib")
    return plan
