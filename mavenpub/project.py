"""
project.py

Responsibility: Typed model of the build project that publishing is configured on.

A host build tool owns the real project; this model carries the values the
configurator reads (coordinates, root directory) and the declarations it writes
(repositories, publications, staging and signing settings).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RepositoryCredentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class MavenRepository:
    """A remote Maven repository that `publish` uploads to."""

    name: str
    url: str
    credentials: RepositoryCredentials | None = None


@dataclass(frozen=True)
class Developer:
    id: str
    name: str
    email: str


@dataclass(frozen=True)
class License:
    name: str
    url: str


@dataclass(frozen=True)
class Scm:
    connection: str
    developer_connection: str
    url: str


@dataclass(frozen=True)
class Pom:
    name: str
    url: str
    description: str
    developers: tuple[Developer, ...]
    license: License
    scm: Scm


@dataclass(frozen=True)
class Artifact:
    """An extra file attached to a publication, produced by a build step."""

    task_name: str
    classifier: str
    extension: str
    source_dir: Path
    depends_on: str | None = None


@dataclass(frozen=True)
class MavenPublication:
    name: str
    component: str
    pom: Pom
    artifacts: tuple[Artifact, ...] = ()


@dataclass
class PublishingExtension:
    """Repositories and publications, both keyed by name."""

    repositories: dict[str, MavenRepository] = field(default_factory=dict)
    publications: dict[str, MavenPublication] = field(default_factory=dict)


@dataclass(frozen=True)
class NexusStagingExtension:
    server_url: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class SigningExtension:
    """In-memory PGP signing of the listed publications."""

    private_key: str = field(repr=False)
    password: str = field(repr=False)
    publications: tuple[str, ...] = ()


@dataclass
class BuildProject:
    group: str
    name: str
    version: str
    root_dir: Path = field(default_factory=Path.cwd)
    publishing: PublishingExtension = field(default_factory=PublishingExtension)
    nexus_staging: NexusStagingExtension | None = None
    signing: SigningExtension | None = None

    @property
    def build_dir(self) -> Path:
        return self.root_dir / "build"

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith("SNAPSHOT")
