"""
config.py

Responsibility: Load `.mavenpub.yml` into a deterministic, typed model.

Expected layout:

    project:
      group: io.github.acme
      name: widget
      version: 1.2.3-SNAPSHOT
      root: .                 # relative to the config file
    publishing:
      owner_slash_repo: acme/widget
      license: MIT License
      project_name: Widget
      description: A widget
    readme:
      section_title: Install
      maven_central: true
      github_url: https://github.com/acme/widget
    staging:
      package_group: io.github.acme   # defaults to project.group

Only `project` is required. Unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mavenpub.project import BuildProject
from mavenpub.publishing import MavenMeta
from mavenpub.readme import DEFAULT_SECTION_TITLE

CONFIG_FILE_NAME = ".mavenpub.yml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ProjectConfig:
    group: str
    name: str
    version: str
    root: Path


@dataclass(frozen=True)
class ReadmeConfig:
    section_title: str = DEFAULT_SECTION_TITLE
    maven_central: bool = False
    github_url: str | None = None


@dataclass(frozen=True)
class StagingConfig:
    package_group: str | None = None


@dataclass(frozen=True)
class MavenPubConfig:
    project: ProjectConfig
    publishing: MavenMeta | None = None
    readme: ReadmeConfig = field(default_factory=ReadmeConfig)
    staging: StagingConfig = field(default_factory=StagingConfig)

    def build_project(self) -> BuildProject:
        return BuildProject(
            group=self.project.group,
            name=self.project.name,
            version=self.project.version,
            root_dir=self.project.root,
        )

    @property
    def package_group(self) -> str:
        return self.staging.package_group or self.project.group


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"`{key}` must be an object/mapping when provided.")
    return raw


def _required_str(section: dict[str, Any], section_name: str, key: str) -> str:
    value = str(section.get(key) or "").strip()
    if not value:
        raise ConfigError(f"`{section_name}.{key}` is required.")
    return value


def _optional_str(section: dict[str, Any], key: str) -> str | None:
    value = section.get(key)
    if value is None:
        return None
    return str(value).strip() or None


def _resolve_config_path(path: Path) -> Path:
    return path / CONFIG_FILE_NAME if path.is_dir() else path


def load_config(config_path: str | Path) -> MavenPubConfig:
    """
    Parse a `.mavenpub.yml` file (or a directory containing one) into a `MavenPubConfig`.
    """
    path = _resolve_config_path(Path(config_path))
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level.")

    project_raw = _section(data, "project")
    version = project_raw.get("version")
    if version is not None and not isinstance(version, str):
        # YAML reads `1.10` as the float 1.1
        raise ConfigError(f"`project.version` must be a quoted string, got {version!r}.")
    root = Path(_optional_str(project_raw, "root") or ".")
    if not root.is_absolute():
        root = path.parent / root
    project = ProjectConfig(
        group=_required_str(project_raw, "project", "group"),
        name=_required_str(project_raw, "project", "name"),
        version=_required_str(project_raw, "project", "version"),
        root=root.resolve(),
    )

    publishing_raw = _section(data, "publishing")
    publishing = None
    if publishing_raw:
        owner_slash_repo = _required_str(publishing_raw, "publishing", "owner_slash_repo")
        if "/" not in owner_slash_repo:
            raise ConfigError("`publishing.owner_slash_repo` must look like 'owner/repo'.")
        publishing = MavenMeta(
            owner_slash_repo=owner_slash_repo,
            license=_required_str(publishing_raw, "publishing", "license"),
            project_name=_optional_str(publishing_raw, "project_name") or project.name,
            description=_optional_str(publishing_raw, "description") or "",
        )

    readme_raw = _section(data, "readme")
    maven_central = readme_raw.get("maven_central", False)
    if not isinstance(maven_central, bool):
        raise ConfigError("`readme.maven_central` must be true or false.")
    readme = ReadmeConfig(
        section_title=_optional_str(readme_raw, "section_title") or DEFAULT_SECTION_TITLE,
        maven_central=maven_central,
        github_url=_optional_str(readme_raw, "github_url"),
    )

    staging_raw = _section(data, "staging")
    staging = StagingConfig(package_group=_optional_str(staging_raw, "package_group"))

    return MavenPubConfig(project=project, publishing=publishing, readme=readme, staging=staging)


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "MavenPubConfig",
    "ProjectConfig",
    "ReadmeConfig",
    "StagingConfig",
    "load_config",
]
