"""Download the tool from a GitHub release into the cache.

One provisioning attempt is:

1. ``GET /repos/{owner}/{repo}/releases/{latest | tags/<tag>}``
2. read ``tarball_url`` from the release JSON
3. download the whole archive into memory
4. gunzip + untar into ``<cache>/temp`` (stale temp removed first)
5. find the single top-level directory GitHub wraps the sources in
6. copy ``dist/`` (or the whole tree) into the cache root
7. remove ``<cache>/temp``

Any failure raises :class:`ProvisioningError`; nothing is retried.
"""

from __future__ import annotations

import io
import logging
import ssl
import tarfile
from pathlib import Path

import httpx
import truststore

from pi_launcher.config import LauncherConfig, github_headers
from pi_launcher.errors import ProvisioningError
from pi_launcher.models import ReleaseDescriptor
from pi_launcher.runtime.cache import CacheStore

logger = logging.getLogger(__name__)


def build_client() -> httpx.Client:
    """HTTP client honouring the OS trust store, with no timeouts."""
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context, timeout=None, follow_redirects=True)


def release_url(config: LauncherConfig) -> str:
    base = f"{config.api_url}/repos/{config.repo_owner}/{config.repo_name}/releases"
    if config.version_tag == "latest":
        return f"{base}/latest"
    return f"{base}/tags/{config.version_tag}"


class RemoteProvisioner:
    """Populates a :class:`CacheStore` from the upstream release archive."""

    def __init__(self, config: LauncherConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client()
        return self._client

    def fetch_release(self) -> ReleaseDescriptor:
        """Request release metadata and extract the tarball URL."""
        url = release_url(self.config)
        logger.debug("Fetching release metadata from %s", url)
        try:
            response = self.client.get(url, headers=github_headers(self.config))
        except httpx.HTTPError as exc:
            raise ProvisioningError(f"Cannot reach GitHub API at {url}: {exc}") from exc

        if not response.is_success:
            raise ProvisioningError(f"GitHub API returned {response.status_code} for {url}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProvisioningError(f"Failed to parse release JSON from {url}: {exc}") from exc
        if not isinstance(data, dict):
            raise ProvisioningError(f"Unexpected release metadata from {url}")

        tarball_url = data.get("tarball_url")
        if not isinstance(tarball_url, str) or not tarball_url:
            raise ProvisioningError(f"Release metadata from {url} has no tarball_url")

        tag = data.get("tag_name")
        return ReleaseDescriptor(tarball_url=tarball_url, tag_name=tag if isinstance(tag, str) else None)

    def download(self, release: ReleaseDescriptor) -> bytes:
        """Download the release archive fully into memory."""
        logger.debug("Downloading %s", release.tarball_url)
        try:
            response = self.client.get(release.tarball_url, headers=github_headers(self.config))
        except httpx.HTTPError as exc:
            raise ProvisioningError(f"Download of {release.tarball_url} failed: {exc}") from exc
        if not response.is_success:
            raise ProvisioningError(
                f"Download of {release.tarball_url} failed with {response.status_code}"
            )
        return response.content

    @staticmethod
    def extract(archive: bytes, target: Path) -> Path:
        """Unpack a gzipped tarball into *target* and return its top directory."""
        try:
            with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tar:
                tar.extractall(target, filter="data")
        except (tarfile.TarError, OSError, EOFError) as exc:
            raise ProvisioningError(f"Failed to unpack release archive: {exc}") from exc

        top_dirs = [entry for entry in target.iterdir() if entry.is_dir()]
        if len(top_dirs) != 1:
            raise ProvisioningError(
                f"Expected one top-level directory in release archive, found {len(top_dirs)}"
            )
        return top_dirs[0]

    def provision(self, cache: CacheStore, *, full: bool | None = None) -> ReleaseDescriptor:
        """Fetch, unpack and copy the release into *cache*.

        Args:
            cache: Destination cache slot.
            full: Copy the whole project tree (needed for dependency install).
                Defaults to ``config.install_dependencies``.

        Returns:
            The release that was installed.

        Raises:
            ProvisioningError: On any network, archive or filesystem failure.
        """
        if full is None:
            full = self.config.install_dependencies

        release = self.fetch_release()
        archive = self.download(release)

        try:
            temp = cache.reset_temp()
            source = self.extract(archive, temp)
            cache.populate_from(source, full=full)
        except OSError as exc:
            raise ProvisioningError(f"Failed to copy release into {cache.root}: {exc}") from exc
        finally:
            cache.discard_temp()

        if not cache.has_entry_point():
            raise ProvisioningError(
                f"Release {release.tag_name or release.tarball_url} has no "
                f"{self.config.dist_dir}/{self.config.entry_point}"
            )
        logger.info("Provisioned %s into %s", release.tag_name or "release", cache.root)
        return release
