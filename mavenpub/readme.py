"""
readme.py

Responsibility: Keep the installation section of a project's README.md current.

- `LibVer` holds the coordinates shown to users (numeric version only).
- Snippet generators are pure functions returning markdown.
- `replace_section_in_md` swaps the body of one `# Title` section.
- `Installation` ties them together for `<root>/README.md`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from mavenpub.logging import get_logger
from mavenpub.project import BuildProject
from mavenpub.templating import render

logger = get_logger("readme")

DEFAULT_SECTION_TITLE = "Install"
DEFAULT_BRANCH = "staging"

_VERSION_RE = re.compile(r"[0-9.]+")


class VersionNotFoundError(ValueError):
    pass


class SectionNotFoundError(ValueError):
    def __init__(self, section_title: str, matches: int) -> None:
        super().__init__(
            f"Expected exactly one '# {section_title}' section followed by another heading, "
            f"found {matches}"
        )
        self.section_title = section_title
        self.matches = matches


def extract_version(raw: str) -> str:
    """Return the first run of digits and dots in `raw`, e.g. '2.3.1' for '2.3.1-SNAPSHOT'."""
    m = _VERSION_RE.search(raw)
    if m is None:
        raise VersionNotFoundError(f"No version found in {raw!r}")
    return m.group(0)


@dataclass(frozen=True)
class LibVer:
    group: str
    artifact: str
    version: str

    @classmethod
    def from_project(cls, project: BuildProject) -> LibVer:
        return cls(
            group=project.group,
            artifact=project.name,
            version=extract_version(project.version),
        )

    def gradle_installation_md(self) -> str:
        return render("gradle_install.md.j2", group=self.group, artifact=self.artifact, version=self.version)

    def maven_installation_md(self) -> str:
        return render("maven_install.md.j2", group=self.group, artifact=self.artifact, version=self.version)

    def github_installation_md(self, repo_url: str, branch: str = DEFAULT_BRANCH) -> str:
        return render(
            "github_install.md.j2",
            group=self.group,
            artifact=self.artifact,
            repo_url=repo_url,
            branch=branch,
        )


def to_spoiler(text: str, summary: str) -> str:
    """Wrap `text` into a collapsible <details> block."""
    return f"<details><summary>{summary}</summary>\n\n{text}\n\n</details>"


def replace_section_in_md(text: str, section_title: str, new_section_text: str) -> str:
    """
    Replace the text between "# Title" and the next "# Next Title".

    The heading lines themselves, including the line breaks around them, are kept.
    Raises SectionNotFoundError unless exactly one such section exists.
    """
    title = re.escape(section_title)
    headings = re.findall(r"[\n\r]#[ \t]+" + title + r"[ \t]*(?=\r\n|[\n\r])", text)
    if len(headings) != 1:
        raise SectionNotFoundError(section_title, len(headings))

    # `adjacent` matches when the next heading starts right on the following line.
    pattern = re.compile(
        r"(?P<head>[\n\r]#[ \t]+" + title + r"[ \t]*(?P<eol>\r\n|[\n\r]))"
        r"(?:(?P<adjacent>)(?=#\s)|.*?(?=(?:\r\n|[\n\r])#\s))",
        re.DOTALL,
    )

    def _replace(m: re.Match[str]) -> str:
        if m.group("adjacent") is not None:
            return m.group("head") + new_section_text + m.group("eol")
        return m.group("head") + new_section_text

    result, count = pattern.subn(_replace, text)
    if count != 1:
        raise SectionNotFoundError(section_title, count)
    return result


class Installation:
    """Finds README.md in the project root and writes installation instructions into it."""

    def __init__(
        self,
        project: BuildProject,
        *,
        github_url: str | None = None,
        section_title: str = DEFAULT_SECTION_TITLE,
        maven_central: bool = False,
    ) -> None:
        self.project = project
        self.github_url = github_url
        self.section_title = section_title
        self.maven_central = maven_central

    @property
    def readme_path(self) -> Path:
        return self.project.root_dir / "README.md"

    def _maven_central_md(self) -> str:
        if not self.maven_central:
            return ""
        lib = LibVer.from_project(self.project)
        return (
            to_spoiler(lib.gradle_installation_md(), "Install from Maven Central with Gradle")
            + "\n\n"
            + to_spoiler(lib.maven_installation_md(), "Install from Maven Central with Maven")
            + "\n\n"
        )

    def _github_md(self) -> str:
        if self.github_url is None:
            return ""
        lib = LibVer.from_project(self.project)
        return (
            to_spoiler(lib.github_installation_md(self.github_url), "Install latest from GitHub with Gradle/Kotlin")
            + "\n\n"
        )

    def instructions_md(self) -> str:
        return self._maven_central_md() + self._github_md()

    def update(self) -> bool:
        """
        Rewrite the README section. Returns True if the file was written.
        """
        path = self.readme_path
        # newline="" keeps \r\n line breaks as they are in the file
        with path.open("r", encoding="utf-8", newline="") as f:
            old_text = f.read()
        new_text = replace_section_in_md(old_text, self.section_title, self.instructions_md())
        if new_text == old_text:
            logger.info("%s is up to date", path)
            return False
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(new_text)
        logger.info("Updated '%s' section of %s", self.section_title, path)
        return True


__all__ = [
    "DEFAULT_SECTION_TITLE",
    "Installation",
    "LibVer",
    "SectionNotFoundError",
    "VersionNotFoundError",
    "extract_version",
    "replace_section_in_md",
    "to_spoiler",
]
