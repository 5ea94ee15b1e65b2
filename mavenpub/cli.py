"""
cli.py

Responsibility: CLI entrypoint for mavenpub.

Commands:
- `configure`: resolve credentials from the environment, configure publishing,
  write the POM and assemble the javadoc jar
- `readme`: rewrite the installation section of README.md
- `release`: close and release the open Sonatype staging repository

This module should orchestrate behavior but keep concerns isolated:
- Config parsing: `config.py`
- Credentials: `credentials.py`
- Publishing model: `publishing.py`
- README: `readme.py`
- Nexus API: `staging.py`
"""

from __future__ import annotations

import argparse
import os
from typing import Mapping

from mavenpub.config import CONFIG_FILE_NAME, MavenPubConfig, load_config
from mavenpub.credentials import SonatypeCredentials, resolve_credentials
from mavenpub.logging import configure_logging, get_logger
from mavenpub.publishing import assemble_artifact, configure, write_pom
from mavenpub.readme import Installation
from mavenpub.staging import NexusStagingClient

logger = get_logger("cli")


class CLIError(RuntimeError):
    pass


def _load(args: argparse.Namespace) -> MavenPubConfig:
    return load_config(args.config)


def configure_cmd(args: argparse.Namespace, env: Mapping[str, str]) -> int:
    config = _load(args)
    if config.publishing is None:
        raise CLIError(f"`publishing` section is required in {CONFIG_FILE_NAME} for `configure`")

    project = config.build_project()
    credentials = resolve_credentials(env)
    configure(project, config.publishing, credentials)

    for repo in project.publishing.repositories.values():
        logger.info("Publishing to %s: %s", repo.name, repo.url)
    if not project.publishing.repositories:
        logger.info("No remote repository configured; publishing locally only")
    if project.signing is not None:
        logger.info("Signing publications: %s", ", ".join(project.signing.publications))

    pom_path = write_pom(project)
    logger.info("POM written to %s", pom_path)

    if not args.skip_javadoc:
        publication = project.publishing.publications["maven"]
        for artifact in publication.artifacts:
            assemble_artifact(project, artifact)
    return 0


def readme_cmd(args: argparse.Namespace, env: Mapping[str, str]) -> int:
    config = _load(args)
    task = Installation(
        config.build_project(),
        github_url=args.github_url or config.readme.github_url,
        section_title=args.section_title or config.readme.section_title,
        maven_central=config.readme.maven_central if args.maven_central is None else args.maven_central,
    )
    task.update()
    return 0


def release_cmd(args: argparse.Namespace, env: Mapping[str, str]) -> int:
    config = _load(args)
    if config.publishing is None:
        raise CLIError(f"`publishing` section is required in {CONFIG_FILE_NAME} for `release`")

    credentials = resolve_credentials(env)
    if not isinstance(credentials, SonatypeCredentials):
        raise CLIError("Releasing requires Sonatype credentials in the environment")

    project = config.build_project()
    if project.is_snapshot:
        raise CLIError(f"Snapshot version {project.version} is not staged; nothing to release")
    configure(project, config.publishing, credentials)

    client = NexusStagingClient.from_extension(project.nexus_staging)
    repo = client.close_and_release(config.package_group)
    logger.info("Released staging repository %s", repo.id)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mavenpub", description="Maven publishing and README installation helper")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--config",
        default=CONFIG_FILE_NAME,
        help=f"Path to the config file or its directory (default: {CONFIG_FILE_NAME})",
    )
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("configure", help="Configure publishing from environment credentials and write the POM")
    c.add_argument("--skip-javadoc", action="store_true", help="Do not assemble the javadoc jar")
    c.set_defaults(func=configure_cmd)

    r = sub.add_parser("readme", help="Update the installation section of README.md")
    r.add_argument("--section-title", default=None, help="Heading to replace (overrides config, default: Install)")
    r.add_argument("--github-url", default=None, help="Repository URL for source-control installation")
    r.add_argument("--maven-central", action="store_true", default=None, help="Include Maven Central instructions")
    r.add_argument(
        "--no-maven-central",
        dest="maven_central",
        action="store_false",
        default=None,
        help="Leave out Maven Central instructions (overrides config)",
    )
    r.set_defaults(func=readme_cmd)

    s = sub.add_parser("release", help="Close and release the open Sonatype staging repository")
    s.set_defaults(func=release_cmd)

    return p


def main(argv: list[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    return int(args.func(args, os.environ if env is None else env))


if __name__ == "__main__":
    raise SystemExit(main())
