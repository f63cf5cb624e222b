"""Helper utilities for Buildfile evaluation."""

from __future__ import annotations

import os

from buildplan.errors import ConfigurationError


def env(name: str, default: str | None = None) -> str:
    """Read a Buildfile setting from the environment.

    Lets CI move the shared output directory without editing the Buildfile:

        plan.output_layout(env("ANDROID_BUILD_BASE", default="../../build"))

    An empty value counts as set. With no value and no default the
    configuration pass stops with ConfigurationError.
    """
    if name in os.environ:
        return os.environ[name]
    if default is not None:
        return default
    raise ConfigurationError(
        f"{name} is not set. Export it before running buildplan, "
        f"or give the Buildfile a fallback: env({name!r}, default=...)"
    )
