"""
publishing.py

Responsibility: Configure the `maven` publication and its target repository.

Depending on the credentials kind the project publishes:
- locally only (LocalCredentials)
- to GitHub Packages (GithubCredentials)
- to Maven Central through Sonatype, signed with GPG (SonatypeCredentials)

Only one target is configured per run. Publishing the same build to several
repositories means running the build once per set of credentials.

The configurator keeps no global state: `configure` returns a PublishingState
that the caller passes back in on the next call, together with a policy for
what to do when the project was already configured.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mavenpub.credentials import Credentials, GithubCredentials, LocalCredentials, SonatypeCredentials
from mavenpub.logging import get_logger
from mavenpub.project import (
    Artifact,
    BuildProject,
    Developer,
    License,
    MavenPublication,
    MavenRepository,
    NexusStagingExtension,
    Pom,
    RepositoryCredentials,
    Scm,
    SigningExtension,
)
from mavenpub.templating import render

logger = get_logger("publishing")

PUBLICATION_NAME = "maven"

GITHUB_PACKAGES_URL = "https://maven.pkg.github.com/{owner_slash_repo}"
GITHUB_REPO_URL = "https://github.com/{owner_slash_repo}"
SONATYPE_SNAPSHOTS_URL = "https://s01.oss.sonatype.org/content/repositories/snapshots/"
SONATYPE_RELEASES_URL = "https://s01.oss.sonatype.org/service/local/staging/deploy/maven2/"
SONATYPE_STAGING_URL = "https://s01.oss.sonatype.org/service/local/"

DEVELOPER = Developer(id="rtmigo", name="Artsiom iG", email="ortemeo@gmail.com")


class PublishingError(RuntimeError):
    pass


class AlreadyConfiguredError(PublishingError):
    pass


class RepeatPolicy(str, Enum):
    """What `configure` does when the project was already configured."""

    WARN = "warn"
    SKIP = "skip"
    ERROR = "error"


@dataclass(frozen=True)
class MavenMeta:
    owner_slash_repo: str
    license: str
    project_name: str
    description: str

    @property
    def owner(self) -> str:
        return self.owner_slash_repo.split("/", 1)[0]

    @property
    def github_url(self) -> str:
        return GITHUB_REPO_URL.format(owner_slash_repo=self.owner_slash_repo)


@dataclass(frozen=True)
class PublishingState:
    configured: bool = False
    runs: int = 0


def _repository(project: BuildProject, meta: MavenMeta, credentials: Credentials) -> MavenRepository | None:
    if isinstance(credentials, LocalCredentials):
        return None
    if isinstance(credentials, GithubCredentials):
        return MavenRepository(
            name="GitHubPackages",
            url=GITHUB_PACKAGES_URL.format(owner_slash_repo=meta.owner_slash_repo),
            credentials=RepositoryCredentials(username=meta.owner, password=credentials.token),
        )
    if isinstance(credentials, SonatypeCredentials):
        return MavenRepository(
            name="maven",
            url=SONATYPE_SNAPSHOTS_URL if project.is_snapshot else SONATYPE_RELEASES_URL,
            credentials=RepositoryCredentials(username=credentials.username, password=credentials.password),
        )
    raise PublishingError(f"Unsupported credentials type: {type(credentials).__name__}")


def build_pom(meta: MavenMeta) -> Pom:
    return Pom(
        name=meta.project_name,
        url=meta.github_url,
        description=meta.description,
        developers=(DEVELOPER,),
        license=License(name=meta.license, url=f"{meta.github_url}/blob/-/LICENSE"),
        scm=Scm(
            connection=f"scm:https://github.com/{meta.owner_slash_repo}.git",
            developer_connection=f"scm:git@github.com:{meta.owner_slash_repo}.git",
            url=meta.github_url,
        ),
    )


def javadoc_jar(project: BuildProject) -> Artifact:
    """The documentation jar built from the Dokka HTML output."""
    return Artifact(
        task_name="javaDocJar",
        classifier="javadoc",
        extension="jar",
        source_dir=project.build_dir / "dokka" / "html",
        depends_on="dokkaHtml",
    )


def configure(
    project: BuildProject,
    meta: MavenMeta,
    credentials: Credentials,
    *,
    state: PublishingState | None = None,
    on_repeat: RepeatPolicy | str = RepeatPolicy.WARN,
) -> PublishingState:
    """
    Configure `project` for publishing according to the type of `credentials`.

    Returns the new state; pass it back as `state` on subsequent calls.
    """
    state = state or PublishingState()
    policy = RepeatPolicy(on_repeat)
    logger.info("configure called for %s and %s", meta, type(credentials).__name__)

    if state.configured:
        if policy is RepeatPolicy.ERROR:
            raise AlreadyConfiguredError(f"Project {project.name} is already configured for publishing")
        if policy is RepeatPolicy.SKIP:
            logger.info("configure skipped: already configured")
            return state
        logger.warning("configure running again")

    publishing = project.publishing
    repo = _repository(project, meta, credentials)
    if repo is not None:
        publishing.repositories[repo.name] = repo
        logger.debug("Registered repository %s at %s", repo.name, repo.url)

    publishing.publications[PUBLICATION_NAME] = MavenPublication(
        name=PUBLICATION_NAME,
        component="java",
        pom=build_pom(meta),
        artifacts=(javadoc_jar(project),),
    )

    if isinstance(credentials, SonatypeCredentials):
        project.nexus_staging = NexusStagingExtension(
            server_url=SONATYPE_STAGING_URL,
            username=credentials.username,
            password=credentials.password,
        )
        project.signing = SigningExtension(
            private_key=credentials.gpg_private_key,
            password=credentials.gpg_password,
            publications=(PUBLICATION_NAME,),
        )

    return PublishingState(configured=True, runs=state.runs + 1)


def render_pom(project: BuildProject, publication: MavenPublication) -> str:
    return render(
        "pom.xml.j2",
        group=project.group,
        artifact=project.name,
        version=project.version,
        pom=publication.pom,
    )


def write_pom(project: BuildProject, publication_name: str = PUBLICATION_NAME) -> Path:
    """Write the POM where Gradle's generatePomFileFor* task would put it."""
    publication = project.publishing.publications.get(publication_name)
    if publication is None:
        raise PublishingError(f"Publication '{publication_name}' is not configured")
    path = project.build_dir / "publications" / publication_name / "pom-default.xml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_pom(project, publication) + "\n", encoding="utf-8", newline="\n")
    logger.debug("POM written to %s", path)
    return path


def assemble_artifact(project: BuildProject, artifact: Artifact) -> Path:
    """
    Zip `artifact.source_dir` into build/libs/<name>-<version>-<classifier>.<ext>.

    Entries are added in sorted order so the archive listing is stable.
    """
    src = artifact.source_dir
    if not src.is_dir():
        hint = f" (run {artifact.depends_on} first)" if artifact.depends_on else ""
        raise PublishingError(f"Directory for {artifact.task_name} not found: {src}{hint}")

    dst = project.build_dir / "libs" / f"{project.name}-{project.version}-{artifact.classifier}.{artifact.extension}"
    dst.parent.mkdir(parents=True, exist_ok=True)
    files = sorted(p for p in src.rglob("*") if p.is_file())
    with zipfile.ZipFile(dst, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for p in files:
            zf.write(p, p.relative_to(src).as_posix())
    logger.info("%s: %d files -> %s", artifact.task_name, len(files), dst)
    return dst


__all__ = [
    "AlreadyConfiguredError",
    "MavenMeta",
    "PublishingError",
    "PublishingState",
    "RepeatPolicy",
    "assemble_artifact",
    "build_pom",
    "configure",
    "javadoc_jar",
    "render_pom",
    "write_pom",
]
