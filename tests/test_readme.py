"""Tests for mavenpub.readme."""

from __future__ import annotations

from pathlib import Path

import pytest

from mavenpub.project import BuildProject
from mavenpub.readme import (
    Installation,
    LibVer,
    SectionNotFoundError,
    VersionNotFoundError,
    extract_version,
    replace_section_in_md,
    to_spoiler,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2.3.1-SNAPSHOT", "2.3.1"),
        ("2.3.1", "2.3.1"),
        ("v1.0", "1.0"),
        ("0.0.1-dev.5", "0.0.1"),
        ("release-12", "12"),
    ],
)
def test_extract_version_returns_first_numeric_run(raw: str, expected: str) -> None:
    assert extract_version(raw) == expected


def test_extract_version_fails_without_digits() -> None:
    with pytest.raises(VersionNotFoundError):
        extract_version("SNAPSHOT")


def test_libver_from_project_uses_numeric_version(tmp_path: Path) -> None:
    project = BuildProject(group="io.github.acme", name="widget", version="2.3.1-SNAPSHOT", root_dir=tmp_path)

    assert LibVer.from_project(project) == LibVer("io.github.acme", "widget", "2.3.1")


def test_libver_from_project_without_version_fails(tmp_path: Path) -> None:
    project = BuildProject(group="g", name="a", version="unspecified", root_dir=tmp_path)

    with pytest.raises(VersionNotFoundError):
        LibVer.from_project(project)


def test_gradle_snippet_contains_both_dialects() -> None:
    md = LibVer("io.github.acme", "widget", "2.3.1").gradle_installation_md()

    assert md.startswith("### build.gradle.kts (Gradle/Kotlin)")
    assert 'implementation("io.github.acme:widget:2.3.1")' in md
    assert "### build.gradle (Gradle/Groovy)" in md
    assert 'implementation "io.github.acme:widget:2.3.1"' in md
    assert md.count("mavenCentral()") == 2
    assert md.endswith("```")


def test_maven_snippet_is_dependency_xml() -> None:
    md = LibVer("io.github.acme", "widget", "2.3.1").maven_installation_md()

    assert md.startswith("## Maven")
    assert "<groupId>io.github.acme</groupId>" in md
    assert "<artifactId>widget</artifactId>" in md
    assert "<version>2.3.1</version>" in md


def test_github_snippet_uses_source_control_and_default_branch() -> None:
    md = LibVer("io.github.acme", "widget", "2.3.1").github_installation_md("https://github.com/acme/widget")

    assert 'gitRepository(java.net.URI("https://github.com/acme/widget.git"))' in md
    assert 'producesModule("io.github.acme:widget")' in md
    assert 'implementation("io.github.acme:widget")' in md
    assert 'version { branch = "staging" }' in md
    assert "2.3.1" not in md


def test_github_snippet_custom_branch() -> None:
    md = LibVer("g", "a", "1").github_installation_md("https://example.com/r", branch="main")

    assert 'branch = "main"' in md


def test_to_spoiler() -> None:
    assert to_spoiler("body", "Title") == "<details><summary>Title</summary>\n\nbody\n\n</details>"


def test_replace_section_scenario() -> None:
    text = "intro\n# Install\nold text\n# Next\nmore"

    assert replace_section_in_md(text, "Install", "new text") == "intro\n# Install\nnew text\n# Next\nmore"


def test_replace_section_tolerates_extra_spaces_in_heading() -> None:
    text = "intro\n#   Install  \nold\n# Next\n"

    assert replace_section_in_md(text, "Install", "new") == "intro\n#   Install  \nnew\n# Next\n"


def test_replace_section_keeps_crlf_line_breaks() -> None:
    text = "intro\r\n# Install\r\nold\r\n# Next\r\n"

    assert replace_section_in_md(text, "Install", "new") == "intro\r\n# Install\r\nnew\r\n# Next\r\n"


def test_replace_section_adjacent_heading_keeps_following_sections() -> None:
    text = "intro\n# Install\n# Usage\nrun it\n# License\nMIT\n"

    result = replace_section_in_md(text, "Install", "new\n")

    assert result == "intro\n# Install\nnew\n\n# Usage\nrun it\n# License\nMIT\n"
    assert replace_section_in_md(result, "Install", "new\n") == result


def test_replace_section_adjacent_heading_with_crlf() -> None:
    text = "intro\r\n# Install\r\n# Usage\r\nrun it\r\n"

    assert replace_section_in_md(text, "Install", "new") == "intro\r\n# Install\r\nnew\r\n# Usage\r\nrun it\r\n"


def test_replace_section_fails_on_adjacent_duplicate_heading() -> None:
    with pytest.raises(SectionNotFoundError) as exc:
        replace_section_in_md("intro\n# Install\n# Install\nb\n# Next\n", "Install", "new")

    assert exc.value.matches == 2


def test_replace_section_with_empty_body_stops_at_next_heading() -> None:
    text = "intro\n# Install\n\n# Next\nkeep\n# Last\n"

    assert replace_section_in_md(text, "Install", "x\n") == "intro\n# Install\nx\n\n# Next\nkeep\n# Last\n"


def test_replace_section_ignores_subheadings() -> None:
    text = "intro\n# Install\nold\n## Sub\nold too\n# Next\n"

    assert replace_section_in_md(text, "Install", "new") == "intro\n# Install\nnew\n# Next\n"


def test_replace_section_is_case_sensitive() -> None:
    with pytest.raises(SectionNotFoundError) as exc:
        replace_section_in_md("intro\n# install\nold\n# Next\n", "Install", "new")

    assert exc.value.matches == 0


def test_replace_section_requires_following_heading() -> None:
    with pytest.raises(SectionNotFoundError):
        replace_section_in_md("intro\n# Install\nold\n", "Install", "new")


def test_replace_section_does_not_match_longer_title() -> None:
    with pytest.raises(SectionNotFoundError):
        replace_section_in_md("intro\n# Installation\nold\n# Next\n", "Install", "new")


def test_replace_section_fails_on_duplicate_heading() -> None:
    text = "intro\n# Install\na\n# Install\nb\n# Next\n"

    with pytest.raises(SectionNotFoundError) as exc:
        replace_section_in_md(text, "Install", "new")

    assert exc.value.matches == 2


def test_replace_section_title_is_literal() -> None:
    text = "intro\n# C++ (setup)\nold\n# Next\n"

    assert replace_section_in_md(text, "C++ (setup)", "new") == "intro\n# C++ (setup)\nnew\n# Next\n"


def test_replace_section_body_is_not_a_regex_template() -> None:
    text = "intro\n# Install\nold\n# Next\n"

    assert replace_section_in_md(text, "Install", r"a\1b") == "intro\n# Install\na\\1b\n# Next\n"


def _write_readme(root: Path, text: str) -> Path:
    path = root / "README.md"
    path.write_text(text, encoding="utf-8")
    return path


def test_installation_with_nothing_enabled_empties_section(project: BuildProject) -> None:
    path = _write_readme(project.root_dir, "intro\n# Install\nold\n# License\nMIT\n")

    assert Installation(project).update() is True
    assert path.read_text(encoding="utf-8") == "intro\n# Install\n\n# License\nMIT\n"


def test_installation_writes_maven_central_and_github(project: BuildProject) -> None:
    path = _write_readme(project.root_dir, "intro\n# Install\nold\n# License\nMIT\n")
    task = Installation(project, github_url="https://github.com/acme/widget", maven_central=True)

    assert task.update() is True
    text = path.read_text(encoding="utf-8")

    gradle = text.index("<details><summary>Install from Maven Central with Gradle</summary>")
    maven = text.index("<details><summary>Install from Maven Central with Maven</summary>")
    github = text.index("<details><summary>Install latest from GitHub with Gradle/Kotlin</summary>")
    assert gradle < maven < github
    assert "io.github.acme:widget:2.3.1" in text
    assert "old" not in text
    assert text.endswith("</details>\n\n\n# License\nMIT\n")


def test_installation_second_run_does_not_write(project: BuildProject, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_readme(project.root_dir, "intro\n# Install\nold\n# License\nMIT\n")
    task = Installation(project, maven_central=True)
    assert task.update() is True
    first = path.read_text(encoding="utf-8")

    opened_for_write = []
    original_open = Path.open

    def tracking_open(self: Path, mode: str = "r", *args, **kwargs):
        if "w" in mode:
            opened_for_write.append(self)
        return original_open(self, mode, *args, **kwargs)

    monkeypatch.setattr(Path, "open", tracking_open)

    assert task.update() is False
    assert opened_for_write == []
    assert path.read_text(encoding="utf-8") == first


def test_installation_keeps_section_directly_after_install(project: BuildProject) -> None:
    path = _write_readme(project.root_dir, "intro\n# Install\n# Usage\nrun it\n# License\nMIT\n")

    assert Installation(project, maven_central=True).update() is True
    text = path.read_text(encoding="utf-8")

    assert "# Usage\nrun it\n# License\nMIT\n" in text
    assert text.index("Install from Maven Central with Gradle") < text.index("# Usage")
    assert Installation(project, maven_central=True).update() is False


def test_installation_custom_section_title(project: BuildProject) -> None:
    path = _write_readme(project.root_dir, "intro\n# Setup\nold\n# License\n")

    Installation(project, section_title="Setup", github_url="https://github.com/acme/widget").update()

    assert "Install latest from GitHub" in path.read_text(encoding="utf-8")


def test_installation_missing_section_leaves_file_untouched(project: BuildProject) -> None:
    original = "intro\n# Usage\ntext\n# License\n"
    path = _write_readme(project.root_dir, original)

    with pytest.raises(SectionNotFoundError):
        Installation(project, maven_central=True).update()

    assert path.read_text(encoding="utf-8") == original
