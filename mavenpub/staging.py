"""
staging.py

Responsibility: Isolate all direct Nexus staging REST API interaction.

Releasing to Maven Central is a two-step affair: `publish` uploads into an open
staging repository, which then has to be closed (validated) and released
(promoted). This module must be the only place that:
- Constructs staging endpoints under the staging server URL
- Sends HTTP requests to the Nexus server
- Interprets staging API responses / error payloads
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

import requests

from mavenpub.logging import get_logger
from mavenpub.project import NexusStagingExtension

logger = get_logger("staging")

DEFAULT_NUM_RETRIES = 20
DEFAULT_RETRY_DELAY = 2.0


class StagingError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class StagingProfile:
    id: str
    name: str


@dataclass(frozen=True)
class StagingRepository:
    id: str
    state: str
    transitioning: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> StagingRepository:
        return cls(
            id=str(data["repositoryId"]),
            state=str(data.get("type") or ""),
            transitioning=bool(data.get("transitioning", False)),
        )


class NexusStagingClient:
    def __init__(
        self,
        server_url: str,
        username: str,
        password: str,
        *,
        num_retries: int = DEFAULT_NUM_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not username.strip() or not password.strip():
            raise StagingError("Staging username and password are required.")
        self._server_url = server_url.rstrip("/")
        self._auth = (username, password)
        self._num_retries = num_retries
        self._retry_delay = retry_delay
        self._sleep = sleep

    @classmethod
    def from_extension(cls, ext: NexusStagingExtension, **kwargs: Any) -> NexusStagingClient:
        return cls(ext.server_url, ext.username, ext.password, **kwargs)

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "mavenpub",
        }

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> Any:
        url = f"{self._server_url}{path}"
        r = requests.request(method, url, headers=self._headers(), auth=self._auth, json=json_body, timeout=30)
        if r.status_code >= 400:
            raise StagingError(
                f"Nexus API error {r.status_code} {method} {path}: {r.text.strip()[:500]}",
                status_code=r.status_code,
            )
        if r.status_code in (201, 204) or not r.content:
            return None
        return r.json()

    def get_profile(self, package_group: str) -> StagingProfile:
        """
        Return the staging profile whose name matches `package_group`.
        """
        data = self._request("GET", "/staging/profiles")
        for p in (data or {}).get("data", []):
            if p.get("name") == package_group:
                return StagingProfile(id=str(p["id"]), name=str(p["name"]))
        raise StagingError(f"No staging profile found for package group '{package_group}'")

    def list_repositories(self, profile_id: str) -> list[StagingRepository]:
        data = self._request("GET", f"/staging/profile_repositories/{profile_id}")
        return [StagingRepository.from_json(r) for r in (data or {}).get("data", [])]

    def get_repository(self, repository_id: str) -> StagingRepository:
        data = self._request("GET", f"/staging/repository/{repository_id}")
        return StagingRepository.from_json(data)

    def find_single_repository(self, profile_id: str, state: str) -> StagingRepository:
        repos = [r for r in self.list_repositories(profile_id) if r.state == state]
        if len(repos) != 1:
            raise StagingError(
                f"Expected exactly one '{state}' staging repository in profile {profile_id}, found {len(repos)}"
            )
        return repos[0]

    def _bulk(self, action: str, repository_id: str, description: str, **extra: Any) -> None:
        body = {"data": {"stagedRepositoryIds": [repository_id], "description": description, **extra}}
        self._request("POST", f"/staging/bulk/{action}", json_body=body)

    def wait_for_state(self, repository_id: str, state: str) -> StagingRepository:
        """
        Poll the repository until it reaches `state` and is no longer transitioning.
        """
        for attempt in range(1, self._num_retries + 1):
            repo = self.get_repository(repository_id)
            if repo.state == state and not repo.transitioning:
                return repo
            logger.debug(
                "Repository %s is %s%s, attempt %d/%d",
                repository_id,
                repo.state,
                " (transitioning)" if repo.transitioning else "",
                attempt,
                self._num_retries,
            )
            if attempt < self._num_retries:
                self._sleep(self._retry_delay)
        raise StagingError(f"Repository {repository_id} did not reach state '{state}'")

    def close_repository(self, repository_id: str, description: str = "Closed by mavenpub") -> StagingRepository:
        logger.info("Closing staging repository %s", repository_id)
        self._bulk("close", repository_id, description)
        return self.wait_for_state(repository_id, "closed")

    def release_repository(self, repository_id: str, description: str = "Released by mavenpub") -> None:
        logger.info("Releasing staging repository %s", repository_id)
        self._bulk("promote", repository_id, description, autoDropAfterRelease=True)
        self.wait_for_release(repository_id)

    def wait_for_release(self, repository_id: str) -> None:
        """
        Poll until the repository is released, or gone because it was dropped after release.
        """
        for attempt in range(1, self._num_retries + 1):
            try:
                repo = self.get_repository(repository_id)
            except StagingError as e:
                if e.status_code == 404:
                    logger.debug("Repository %s dropped after release", repository_id)
                    return
                raise
            if repo.state == "released" and not repo.transitioning:
                return
            logger.debug("Repository %s is %s, attempt %d/%d", repository_id, repo.state, attempt, self._num_retries)
            if attempt < self._num_retries:
                self._sleep(self._retry_delay)
        raise StagingError(f"Repository {repository_id} was not released")

    def close_and_release(self, package_group: str) -> StagingRepository:
        """
        Close the single open repository of the profile for `package_group`, then release it.
        """
        profile = self.get_profile(package_group)
        repo = self.find_single_repository(profile.id, "open")
        closed = self.close_repository(repo.id)
        self.release_repository(closed.id)
        return closed


__all__ = [
    "NexusStagingClient",
    "StagingError",
    "StagingProfile",
    "StagingRepository",
]
