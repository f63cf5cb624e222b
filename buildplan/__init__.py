from buildplan.plan import BuildPlan, ConfiguredBuild, Project
from buildplan.repositories import Repository, RepositorySet
from buildplan.classpath import Classpath, ToolDependency
from buildplan.layout import OutputLayout
from buildplan.tasks import CleanAction, Task
from buildplan.errors import ConfigurationError, FilesystemError
from buildplan.helpers import env

__all__ = [
    "BuildPlan",
    "ConfiguredBuild",
    "Project",
    "Repository",
    "RepositorySet",
    "Classpath",
    "ToolDependency",
    "OutputLayout",
    "CleanAction",
    "Task",
    "ConfigurationError",
    "FilesystemError",
    "env",
]
