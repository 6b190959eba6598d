"""CLI entry point for pubflow."""

from __future__ import annotations

import click

from pubflow.config import ReleaseOptions, Settings, load_settings
from pubflow.errors import PubflowError
from pubflow.models import Availability
from pubflow.pipeline import run_release
from pubflow.project import Project
from pubflow.services import Services
from pubflow.versions import resolve


def _pick(flag: object, setting: object) -> object:
    """A CLI flag wins over [tool.pubflow] unless it was left unset."""
    return setting if flag is None else flag


def resolve_options(
    services: Services,
    settings: Settings,
    new_version: str,
    *,
    tests: bool | None = None,
    build: bool | None = None,
    publish: bool | None = None,
    cleanup: bool | None = None,
    yolo: bool = False,
    preview: bool = False,
    message: str | None = None,
    release_draft: bool | None = None,
    two_factor: bool | None = None,
    index: str | None = None,
    branch: str | None = None,
    any_branch: bool = False,
    test_command: str | None = None,
    build_command: str | None = None,
) -> ReleaseOptions:
    """Merge command-line flags over [tool.pubflow] into a ReleaseOptions.

    Private packages are never published. The index is only asked about
    name availability when two-factor enablement could follow a publish.
    """
    project = services.project

    run_tests = bool(_pick(tests, settings.tests))
    run_cleanup = bool(_pick(cleanup, settings.cleanup))
    if yolo:
        run_tests = run_cleanup = False

    run_publish = bool(_pick(publish, settings.publish))
    if run_publish and project.is_private():
        click.echo(f"{project.name} is marked private; it will not be published.")
        run_publish = False

    use_two_factor = bool(_pick(two_factor, settings.two_factor))
    availability = Availability()
    if run_publish and use_two_factor:
        availability = services.registry.check_availability(project.name)

    return ReleaseOptions(
        version=new_version,
        run_build=bool(_pick(build, settings.build)),
        run_publish=run_publish,
        run_tests=run_tests,
        cleanup=run_cleanup,
        preview=preview,
        message=message or settings.message,
        release_draft=bool(_pick(release_draft, settings.release_draft)),
        two_factor=use_two_factor,
        index=index or settings.index,
        branch=branch or settings.branch or services.git.default_branch(),
        any_branch=any_branch or settings.any_branch,
        availability=availability,
        repo_url=project.repo_url() or services.git.remote_url(),
        test_command=test_command or settings.test_command,
        build_command=build_command or settings.build_command,
        tag_prefix=settings.tag_prefix,
    )


@click.command()
@click.version_option(package_name="pubflow")
@click.argument("increment", metavar="VERSION")
@click.option("--preid", default=None, help="Prerelease identifier, e.g. rc or beta.")
@click.option("--tests/--no-tests", default=None, help="Run the test command.")
@click.option("--build/--no-build", default=None, help="Build distributions.")
@click.option("--publish/--no-publish", default=None, help="Upload to the index.")
@click.option(
    "--cleanup/--no-cleanup",
    default=None,
    help="Recreate the virtual environment and reinstall dependencies.",
)
@click.option("--yolo", is_flag=True, help="Skip cleanup and testing.")
@click.option(
    "--preview", is_flag=True, help="Show tasks without actually executing them."
)
@click.option(
    "-m",
    "--message",
    default=None,
    help="Version bump commit message; %s becomes the new version.",
)
@click.option(
    "--release-draft/--no-release-draft",
    default=None,
    help="Open a GitHub release draft after the push.",
)
@click.option(
    "--2fa/--no-2fa",
    "two_factor",
    default=None,
    help="Require two-factor authentication for a newly published package.",
)
@click.option("--index", default=None, help="Named [[tool.uv.index]] to publish to.")
@click.option("--branch", default=None, help="Name of the release branch.")
@click.option("--any-branch", is_flag=True, help="Allow publishing from any branch.")
@click.option("--test-command", default=None, help="Command used to run the tests.")
@click.option(
    "--build-command", default=None, help="Command used to build distributions."
)
def cli(increment: str, preid: str | None, **flags: object) -> None:
    """Bump, tag, build and publish a Python package.

    VERSION is one of patch, minor, major, prepatch, preminor, premajor,
    prerelease, or an explicit version like 1.2.3.
    """
    try:
        project = Project.discover()
        settings = load_settings(project)
        current = project.read_version()
        new_version = resolve(current, increment, preid)

        services = Services.for_project(project, flags.get("index") or settings.index)
        options = resolve_options(services, settings, new_version, **flags)

        click.echo(f"\nPublish a new version of {project.name} (current: {current})")
        click.echo(f"  {current} → {new_version}")
        ctx = run_release(options, services)
    except PubflowError as exc:
        raise click.ClickException(str(exc)) from exc

    if options.preview:
        banner = "Preview complete"
    else:
        banner = f"{project.name} {ctx.new_version} released"
    click.echo(f"\n{'=' * 60}\n{banner}\n{'=' * 60}")

