"""
Release resolution for the Slang toolchain.

Given a target triple, find the download URL of the matching release
archive on the GitHub releases API:

1. Parse the triple into a :class:`SlangPlatform` (fails before any request)
2. GET ``/repos/<owner>/<repo>/releases/latest`` (or ``/releases/tags/<tag>``)
3. Decode the JSON body into a minimal :class:`Release`
4. Pick the first asset whose name ends with ``<os>-<arch>.zip``

Example:
    >>> resolver = ReleaseResolver()
    >>> asset = resolver.resolve("x86_64-unknown-linux-gnu")
    >>> asset.browser_download_url
    'https://github.com/shader-slang/slang/releases/download/v2025.../slang-...-linux-x86_64.zip'
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from requests.exceptions import RequestException

from slangkit.config.parser import ReleaseConfig
from slangkit.core.exceptions import (
    AssetNotFoundError,
    ReleaseFetchError,
    ReleaseMetadataError,
)
from slangkit.core.platform import SlangPlatform, parse_target_triple

logger = logging.getLogger(__name__)


@dataclass
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    browser_download_url: str
    digest: Optional[str] = None
    """'sha256:<hex>' when GitHub publishes one"""


@dataclass
class Release:
    """The parts of a GitHub release the resolver uses."""

    tag_name: Optional[str] = None
    assets: List[ReleaseAsset] = field(default_factory=list)

    def asset_names(self) -> List[str]:
        return [asset.name for asset in self.assets]


def release_endpoint(config: ReleaseConfig) -> str:
    """
    Build the release-listing URL for a configuration.

    Example:
        >>> release_endpoint(ReleaseConfig())
        'https://api.github.com/repos/shader-slang/slang/releases/latest'
    """
    base = f"{config.api_url}/repos/{config.repository}/releases"
    if config.tag == "latest":
        return f"{base}/latest"
    return f"{base}/tags/{config.tag}"


def request_headers(config: ReleaseConfig) -> dict:
    """Headers sent to the GitHub API; it rejects requests with no User-Agent."""
    headers = {
        "User-Agent": config.user_agent,
        "Accept": "application/vnd.github+json",
    }
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    return headers


def parse_release(body: str) -> Release:
    """
    Decode a release-listing body.

    Only ``tag_name`` and each asset's ``name``, ``browser_download_url`` and
    ``digest`` are read; every other field is ignored.

    Raises:
        ReleaseMetadataError: If the body is not JSON or lacks the asset
            list; the message includes the raw body, since rate-limit and
            error payloads come back with a different shape
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ReleaseMetadataError(
            f"Failed to deserialize from json ({e}), the str input was: {body}",
            body=body,
        ) from e

    if not isinstance(data, dict) or not isinstance(data.get("assets"), list):
        raise ReleaseMetadataError(
            f"Release JSON has no 'assets' list, the str input was: {body}",
            body=body,
        )

    assets = []
    for entry in data["assets"]:
        if (
            not isinstance(entry, dict)
            or not isinstance(entry.get("name"), str)
            or not isinstance(entry.get("browser_download_url"), str)
        ):
            raise ReleaseMetadataError(
                f"Release asset is missing 'name' or 'browser_download_url', "
                f"the str input was: {body}",
                body=body,
            )
        digest = entry.get("digest")
        assets.append(
            ReleaseAsset(
                name=entry["name"],
                browser_download_url=entry["browser_download_url"],
                digest=digest if isinstance(digest, str) else None,
            )
        )

    tag_name = data.get("tag_name")
    return Release(tag_name=tag_name if isinstance(tag_name, str) else None, assets=assets)


def select_asset(release: Release, platform_info: SlangPlatform) -> ReleaseAsset:
    """
    Pick the first asset whose name ends with the platform's archive suffix.

    Raises:
        AssetNotFoundError: If no asset matches
    """
    suffix = platform_info.asset_suffix()
    for asset in release.assets:
        if asset.name.endswith(suffix):
            logger.debug(f"Selected release asset: {asset.name}")
            return asset
    raise AssetNotFoundError(suffix, release.asset_names())


class ReleaseResolver:
    """
    Resolves Slang release archives from the GitHub releases API.

    Each call makes exactly one metadata request; nothing is cached or
    retried.
    """

    def __init__(
        self,
        config: Optional[ReleaseConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize resolver.

        Args:
            config: Release source settings (defaults to shader-slang/slang latest)
            session: Optional requests session (module-level requests when None)
        """
        self.config = config or ReleaseConfig()
        self.session = session

    def fetch_release(self) -> Release:
        """
        Fetch and decode the configured release.

        Raises:
            ReleaseFetchError: On transport failure or error status
            ReleaseMetadataError: If the body is not a release listing
        """
        url = release_endpoint(self.config)
        logger.info(f"Fetching release metadata: {url}")

        http = self.session or requests
        try:
            response = http.get(
                url,
                headers=request_headers(self.config),
                timeout=self.config.timeout,
                allow_redirects=True,
            )
        except RequestException as e:
            raise ReleaseFetchError(f"Failed to fetch {url}: {e}") from e

        body = response.text
        if not response.ok:
            raise ReleaseFetchError(
                f"Failed to fetch {url}: HTTP {response.status_code}: {body}"
            )
        if not body:
            raise ReleaseFetchError(f"Failed to fetch {url}: empty response body")

        release = parse_release(body)
        logger.info(
            f"Release {release.tag_name or self.config.tag} has {len(release.assets)} assets"
        )
        return release

    def resolve_platform(self, platform_info: SlangPlatform) -> ReleaseAsset:
        """Fetch the release and select the asset for a platform."""
        release = self.fetch_release()
        return select_asset(release, platform_info)

    def resolve(self, target_triple: str) -> ReleaseAsset:
        """
        Resolve the release asset for a target triple.

        Raises:
            UnsupportedPlatformError: If the triple is not supported (no
                request is made)
            ReleaseFetchError, ReleaseMetadataError, AssetNotFoundError
        """
        platform_info = parse_target_triple(target_triple)
        return self.resolve_platform(platform_info)

    def resolve_download_url(self, target_triple: str) -> str:
        """Resolve just the download URL for a target triple."""
        return self.resolve(target_triple).browser_download_url


__all__ = [
    "ReleaseAsset",
    "Release",
    "ReleaseResolver",
    "release_endpoint",
    "request_headers",
    "parse_release",
    "select_asset",
]
