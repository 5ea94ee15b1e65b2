from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mavenpub.project import BuildProject
from mavenpub.publishing import MavenMeta


@pytest.fixture
def project(tmp_path: Path) -> BuildProject:
    """A release-version project rooted at the pytest tmp_path."""
    return BuildProject(group="io.github.acme", name="widget", version="2.3.1", root_dir=tmp_path)


@pytest.fixture
def meta() -> MavenMeta:
    return MavenMeta(
        owner_slash_repo="acme/widget",
        license="MIT License",
        project_name="Widget",
        description="Widgets for everyone",
    )


@pytest.fixture(autouse=True)
def _reset_mavenpub_logger():
    """Undo configure_logging() so caplog keeps seeing mavenpub records."""
    yield
    logger = logging.getLogger("mavenpub")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
