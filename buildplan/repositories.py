"""Package repositories searched for dependencies and build plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from buildplan.errors import ConfigurationError

logger = logging.getLogger(__name__)


# Repositories the host tool knows by name.
_WELL_KNOWN: dict[str, str] = {
    "google": "https://dl.google.com/dl/android/maven2/",
    "mavenCentral": "https://repo.maven.apache.org/maven2/",
    "gradlePluginPortal": "https://plugins.gradle.org/m2/",
    "mavenLocal": "~/.m2/repository/",
}


@dataclass(frozen=True)
class Repository:
    """A named package source.

    Use Repository.named() for the repositories the host tool knows by
    name, or Repository.maven() for any other Maven-layout URL.
    """

    name: str
    url: str
    well_known: bool = True

    @classmethod
    def named(cls, name: str) -> Repository:
        url = _WELL_KNOWN.get(name)
        if url is None:
            known = ", ".join(sorted(_WELL_KNOWN))
            raise ConfigurationError(
                f"Unknown repository {name!r}. Known repositories: {known}. "
                f"Use Repository.maven(url) for anything else."
            )
        return cls(name=name, url=url)

    @classmethod
    def maven(cls, url: str, name: str | None = None) -> Repository:
        if not url or not url.strip():
            raise ConfigurationError("Repository.maven() requires a non-empty url")
        return cls(name=name or url, url=url, well_known=False)


def known_repositories() -> list[str]:
    return list(_WELL_KNOWN)


def _coerce(item: str | Repository) -> Repository:
    if isinstance(item, Repository):
        return item
    return Repository.named(item)


class RepositorySet:
    """Ordered, duplicate-free set of repositories.

    Order is kept as declared; the host tool resolves against earlier
    entries first.
    """

    def __init__(self, repos: Iterable[str | Repository] = ()):
        self._repos: list[Repository] = []
        self.extend(repos)

    def extend(self, repos: Iterable[str | Repository]) -> None:
        """Add repositories in order. The whole batch is rejected on error."""
        batch = [_coerce(r) for r in repos]

        seen = {r.name for r in self._repos}
        for repo in batch:
            if repo.name in seen:
                raise ConfigurationError(f"Repository {repo.name!r} is declared more than once")
            seen.add(repo.name)

        self._repos.extend(batch)
        for repo in batch:
            logger.debug(f"Registered repository {repo.name} ({repo.url})")

    @property
    def names(self) -> list[str]:
        return [r.name for r in self._repos]

    def copy(self) -> RepositorySet:
        return RepositorySet(self._repos)

    def __iter__(self) -> Iterator[Repository]:
        return iter(self._repos)

    def __len__(self) -> int:
        return len(self._repos)

    def __contains__(self, name: object) -> bool:
        return any(r.name == name for r in self._repos)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositorySet):
            return NotImplemented
        return self._repos == other._repos

    def __repr__(self) -> str:
        return f"RepositorySet({self.names!r})"
