"""Exceptions raised while configuring or running a build plan."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """The descriptor is invalid. Raised during the configuration pass.

    Nothing from the failing declaration is registered when this is raised.
    """


class FilesystemError(RuntimeError):
    """A filesystem action (e.g. clean) could not complete."""
