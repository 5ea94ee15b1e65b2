"""
credentials.py

Responsibility: Detect which publishing credentials the environment provides.

Each credential kind reads a fixed group of environment variables:
- a group is resolved when all of its variables are set and non-blank
- a group is skipped when none of its variables are set
- a partially filled group is an error

At most one group may resolve. No group means local-only publishing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence, Union

from mavenpub.logging import get_logger

logger = get_logger("credentials")

GITHUB_TOKEN_KEY = "GITHUB_PKGPUB_TOKEN"
SONATYPE_USERNAME_KEY = "SONATYPE_USERNAME"
SONATYPE_PASSWORD_KEY = "SONATYPE_PASSWORD"
GPG_KEY_KEY = "MAVEN_GPG_KEY"
GPG_PASSWORD_KEY = "MAVEN_GPG_PASSWORD"


class EnvKeyNotFoundError(RuntimeError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Env does not have non-blank '{key}' defined.")
        self.key = key


class AmbiguousCredentialsError(RuntimeError):
    def __init__(self, kinds: Sequence[str]) -> None:
        super().__init__(
            f"Env contains {len(kinds)} possible matching credential sets: {', '.join(kinds)}"
        )
        self.kinds = list(kinds)


def _read_group(env: Mapping[str, str], keys: Sequence[str]) -> dict[str, str] | None:
    """
    Return the values of `keys` if all are set, None if none are set.

    Blank values count as unset.
    """
    present = {k: env[k] for k in keys if (env.get(k) or "").strip()}
    if not present:
        return None
    for k in keys:
        if k not in present:
            raise EnvKeyNotFoundError(k)
    return present


@dataclass(frozen=True)
class LocalCredentials:
    """No remote credentials: publish to the local Maven repository only."""


@dataclass(frozen=True)
class GithubCredentials:
    token: str = field(repr=False)

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> GithubCredentials | None:
        values = _read_group(env, (GITHUB_TOKEN_KEY,))
        if values is None:
            return None
        return cls(token=values[GITHUB_TOKEN_KEY])


@dataclass(frozen=True)
class SonatypeCredentials:
    """
    Sonatype account plus the GPG key used to sign the publication.

    Maven Central requires signed artifacts, so the two always travel together.
    """

    # Sonatype username or user token name
    username: str
    # Sonatype password or user token password
    password: str = field(repr=False)
    # ASCII armored private key
    gpg_private_key: str = field(repr=False)
    # passphrase for gpg_private_key
    gpg_password: str = field(repr=False)

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> SonatypeCredentials | None:
        values = _read_group(
            env,
            (SONATYPE_USERNAME_KEY, SONATYPE_PASSWORD_KEY, GPG_KEY_KEY, GPG_PASSWORD_KEY),
        )
        if values is None:
            return None
        return cls(
            username=values[SONATYPE_USERNAME_KEY],
            password=values[SONATYPE_PASSWORD_KEY],
            gpg_private_key=values[GPG_KEY_KEY],
            gpg_password=values[GPG_PASSWORD_KEY],
        )


Credentials = Union[LocalCredentials, GithubCredentials, SonatypeCredentials]

_DETECTORS: tuple[Callable[[Mapping[str, str]], Credentials | None], ...] = (
    GithubCredentials.from_env,
    SonatypeCredentials.from_env,
)


def resolve_credentials(env: Mapping[str, str]) -> Credentials:
    """
    Pick the credential kind matching the variables defined in `env`.

    Raises EnvKeyNotFoundError for a partially defined group and
    AmbiguousCredentialsError when more than one group is defined.
    """
    found = [c for c in (detect(env) for detect in _DETECTORS) if c is not None]

    if len(found) > 1:
        raise AmbiguousCredentialsError([type(c).__name__ for c in found])

    result: Credentials = found[0] if found else LocalCredentials()
    logger.info("Auto-detected credentials type: %s", type(result).__name__)
    return result


__all__ = [
    "AmbiguousCredentialsError",
    "Credentials",
    "EnvKeyNotFoundError",
    "GithubCredentials",
    "LocalCredentials",
    "SonatypeCredentials",
    "resolve_credentials",
]
