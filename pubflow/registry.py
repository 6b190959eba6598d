"""Package index operations.

Uploads go through `uv publish`, optionally to a named [[tool.uv.index]]
from pyproject.toml. Name availability is looked up with the PyPI JSON API.
"""

from __future__ import annotations

from urllib.parse import urlparse

import click
import requests
from packaging.utils import canonicalize_name

from .errors import PreflightError
from .models import Availability, ReleaseContext
from .project import Project
from .shell import info, run

PYPI_URL = "https://pypi.org"
PYPI_UPLOAD_HOSTS = ("upload.pypi.org", "pypi.org")
REQUEST_TIMEOUT = 10


class PackageIndex:
    """The index a package is published to.

    Args:
        project: The package being released.
        index: Name of a [[tool.uv.index]] entry, or None for PyPI.
    """

    def __init__(self, project: Project, index: str | None = None) -> None:
        self.project = project
        self.index = index

    @property
    def publish_url(self) -> str | None:
        if self.index is None:
            return None
        return self.project.index_publish_url(self.index)

    def is_external_registry(self) -> bool:
        """True when uploads go somewhere other than PyPI."""
        if self.index is None:
            return False
        url = self.publish_url
        if url is None:
            return True
        return urlparse(url).hostname not in PYPI_UPLOAD_HOSTS

    def publish_args(self) -> list[str]:
        args = ["publish"]
        if self.index:
            args.extend(["--index", self.index])
        return args

    def publish(self, ctx: ReleaseContext) -> None:
        """Upload everything in dist/.

        Raises:
            CommandError: If uv publish fails; stderr is attached.
        """
        run("uv", *self.publish_args(), capture=True, cwd=self.project.root)
        info(f"Published {self.project.name} {ctx.new_version}")

    def two_factor_url(self, package_name: str) -> str:
        return f"{PYPI_URL}/manage/project/{canonicalize_name(package_name)}/settings/"

    def enable_two_factor(self, otp: str | None, package_name: str) -> None:
        """Open the project's settings page to require two-factor auth.

        PyPI only exposes this setting through its web UI, so the OTP is
        not sent anywhere; it is accepted for parity with indexes that do.
        """
        url = self.two_factor_url(package_name)
        info(f"Require two-factor authentication for maintainers at {url}")
        click.launch(url)

    def check_availability(self, package_name: str) -> Availability:
        """Ask PyPI whether the package name is still unclaimed.

        Any network failure or unexpected response yields an unknown result
        rather than an error.
        """
        if self.is_external_registry():
            return Availability(is_available=False, is_unknown=True)

        url = f"{PYPI_URL}/pypi/{canonicalize_name(package_name)}/json"
        try:
            response = requests.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException:
            return Availability(is_available=False, is_unknown=True)

        if response.status_code == 404:
            return Availability(is_available=True, is_unknown=False)
        if response.ok:
            return Availability(is_available=False, is_unknown=False)
        return Availability(is_available=False, is_unknown=True)

    def ping(self) -> None:
        """Check that the index answers at all.

        Raises:
            PreflightError: If the index cannot be reached.
        """
        url = self.publish_url or f"{PYPI_URL}/simple/"
        try:
            requests.head(url, timeout=REQUEST_TIMEOUT, allow_redirects=True)
        except requests.RequestException as exc:
            raise PreflightError(
                f"Connection to {url} timed out or failed: {exc}"
            ) from exc
