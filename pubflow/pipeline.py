"""Release pipeline: check → install → test → bump → build → publish → push.

This module orchestrates the pubflow release process:
1. Check prerequisites (index, git, target version) when publishing
2. Check the release branch and working tree
3. Optionally recreate the virtual environment and reinstall dependencies
4. Optionally run the tests
5. Bump the version in pyproject.toml, commit and tag it
6. Optionally build distributions
7. Optionally publish them, then require two-factor auth on a new project
8. Push commits and tags
9. Optionally open a GitHub release draft

The step list is assembled once from the options snapshot. If building or
publishing fails, the bump commit and tag are rolled back before the error
propagates.
"""

from __future__ import annotations

import shlex
import shutil
import sys

from .config import ReleaseOptions
from .errors import StepExecutionError
from .hosting import create_release_draft, is_github
from .models import (
    PublishStatus,
    ReleaseContext,
    Step,
    StepOutcome,
    StepStatus,
)
from .preflight import check_git, check_prerequisites
from .project import LOCK_FILE
from .rollback import RollbackGuard, rollback
from .services import Services
from .shell import run, step
from .termination import TerminationHandler

PREREQUISITES = "Prerequisite check"
GIT = "Git"
CLEANUP = "Cleanup"
INSTALL = "Installing dependencies using uv"
TESTS = "Running tests using uv"
BUMP = "Bumping version"
BUILD = "Running build using uv"
PUBLISH = "Publishing package using uv"
TWO_FACTOR = "Enabling two-factor authentication"
PUSH = "Pushing tags"
RELEASE_DRAFT = "Creating release draft on GitHub"

VENV_DIR = ".venv"


def new_context(options: ReleaseOptions, original_version: str) -> ReleaseContext:
    """Create the context for a run.

    When nothing is published there is nothing a failed upload could leave
    behind, so the publish status starts out as SUCCESS.
    """
    status = PublishStatus.UNKNOWN if options.run_publish else PublishStatus.SUCCESS
    return ReleaseContext(
        original_version=original_version,
        new_version=options.version,
        publish_status=status,
    )


def build_steps(
    options: ReleaseOptions, services: Services, rollback: RollbackGuard
) -> tuple[Step, ...]:
    """Assemble the ordered release steps for an options snapshot.

    Args:
        options: The release configuration.
        services: Project, git and index collaborators.
        rollback: Guard around the rollback routine, called when building
                  or publishing fails.

    Returns:
        The steps in run order.
    """
    project, git, registry = services.project, services.git, services.registry
    on_github = is_github(options.repo_url)

    steps: list[Step] = [
        Step(
            name=PREREQUISITES,
            enabled=lambda ctx: options.run_publish,
            action=lambda ctx: check_prerequisites(options, project, git, registry),
        ),
        Step(name=GIT, action=lambda ctx: check_git(options, git)),
    ]

    if options.cleanup:

        def remove_venv(ctx: ReleaseContext) -> None:
            shutil.rmtree(project.root / VENV_DIR, ignore_errors=True)

        def install(ctx: ReleaseContext) -> None:
            if project.has_lock_file():
                run("uv", "sync", "--locked", cwd=project.root)
            else:
                run("uv", "sync", cwd=project.root)

        steps.append(
            Step(
                name=CLEANUP,
                # With a lock file, `uv sync --locked` reconciles the venv itself
                enabled=lambda ctx: not project.has_lock_file(),
                action=remove_venv,
            )
        )
        steps.append(Step(name=INSTALL, action=install))

    if options.run_tests:

        def run_tests(ctx: ReleaseContext) -> None:
            run(*shlex.split(options.test_command), cwd=project.root)

        steps.append(Step(name=TESTS, action=run_tests))

    def bump_skip(ctx: ReleaseContext) -> str | None:
        if not options.preview:
            return None
        text = (
            f"[Preview] Command not executed: set version {ctx.original_version} "
            f"→ {ctx.new_version}, commit and tag {options.git_tag}"
        )
        if options.message:
            text += f" --message '{options.commit_message()}'"
        return f"{text}."

    def bump(ctx: ReleaseContext) -> None:
        project.write_version(ctx.new_version)
        paths = [str(project.pyproject)]
        if project.has_lock_file():
            # uv.lock records the project's own version
            run("uv", "lock", capture=True, cwd=project.root)
            paths.append(str(project.root / LOCK_FILE))
        git.add(*paths)
        git.commit(options.commit_message())
        # Packages in a subdirectory of a repository are not tagged
        if project.is_git_root():
            git.tag(options.git_tag)

    steps.append(Step(name=BUMP, skip=bump_skip, action=bump))

    if options.run_build:

        def build_skip(ctx: ReleaseContext) -> str | None:
            if options.preview:
                return f"[Preview] Command not executed: {options.build_command}."
            return None

        def build(ctx: ReleaseContext) -> None:
            try:
                run(*shlex.split(options.build_command), cwd=project.root)
            except Exception as exc:
                rollback()
                raise StepExecutionError(
                    BUILD,
                    f"Build failed: {exc}; the project was rolled back to its "
                    "previous state.",
                    rolled_back=True,
                ) from exc

        steps.append(Step(name=BUILD, skip=build_skip, action=build))

    if options.run_publish:

        def publish_skip(ctx: ReleaseContext) -> str | None:
            if options.preview:
                args = " ".join(registry.publish_args())
                return f"[Preview] Command not executed: uv {args}."
            return None

        def publish(ctx: ReleaseContext) -> None:
            try:
                registry.publish(ctx)
            except Exception as exc:
                ctx.publish_status = PublishStatus.FAILED
                rollback()
                raise StepExecutionError(
                    PUBLISH,
                    f"Error publishing package:\n{exc}\n\n"
                    "The project was rolled back to its previous state.",
                    rolled_back=True,
                ) from exc
            ctx.publish_status = PublishStatus.SUCCESS

        steps.append(Step(name=PUBLISH, skip=publish_skip, action=publish))

        availability = options.availability
        if (
            options.two_factor
            and availability.is_available
            and not availability.is_unknown
            and not project.is_private()
            and not registry.is_external_registry()
        ):
            package_name = project.name

            def two_factor_skip(ctx: ReleaseContext) -> str | None:
                if options.preview:
                    url = registry.two_factor_url(package_name)
                    return f"[Preview] Two-factor settings will not be opened: {url}."
                return None

            steps.append(
                Step(
                    name=TWO_FACTOR,
                    skip=two_factor_skip,
                    action=lambda ctx: registry.enable_two_factor(
                        ctx.otp, package_name
                    ),
                )
            )

    def push_skip(ctx: ReleaseContext) -> str | None:
        if not git.has_upstream():
            return "Upstream branch not found; not pushing."
        if options.preview:
            return "[Preview] Command not executed: git push --follow-tags."
        if ctx.publish_status is PublishStatus.FAILED and options.run_publish:
            return "Couldn't publish package to the index; not pushing."
        return None

    def push(ctx: ReleaseContext) -> None:
        ctx.pushed = git.push_graceful(on_github)

    steps.append(Step(name=PUSH, skip=push_skip, action=push))

    if options.release_draft:

        def release_draft_skip(ctx: ReleaseContext) -> str | None:
            if options.preview:
                return (
                    "[Preview] GitHub Releases draft will not be opened "
                    "in preview mode."
                )
            return None

        steps.append(
            Step(
                name=RELEASE_DRAFT,
                enabled=lambda ctx: on_github,
                skip=release_draft_skip,
                action=lambda ctx: create_release_draft(
                    options.repo_url or "", options.git_tag, ctx.new_version
                ),
            )
        )

    return tuple(steps)


def run_steps(steps: tuple[Step, ...], ctx: ReleaseContext) -> ReleaseContext:
    """Run steps in order, recording an outcome for each enabled one.

    Disabled steps leave no trace. A skipped step records its reason and
    its action does not run. The first failing action stops the run.

    Returns:
        The same context, with outcomes appended.

    Raises:
        StepExecutionError: If a step's action fails.
    """
    for s in steps:
        if not s.enabled(ctx):
            continue

        reason = s.skip(ctx)
        if reason is not None:
            ctx.outcomes.append(
                StepOutcome(name=s.name, status=StepStatus.SKIPPED, reason=reason)
            )
            print(f"↓ {s.name} [skipped]\n  → {reason}")
            continue

        step(s.name)
        try:
            s.action(ctx)
        except StepExecutionError as exc:
            ctx.outcomes.append(
                StepOutcome(name=s.name, status=StepStatus.FAILED, reason=str(exc))
            )
            print(f"✖ {s.name}", file=sys.stderr)
            raise
        except Exception as exc:
            ctx.outcomes.append(
                StepOutcome(name=s.name, status=StepStatus.FAILED, reason=str(exc))
            )
            print(f"✖ {s.name}", file=sys.stderr)
            raise StepExecutionError(s.name, f"{s.name} failed: {exc}") from exc

        ctx.outcomes.append(StepOutcome(name=s.name, status=StepStatus.SUCCEEDED))
        print(f"✔ {s.name}")

    return ctx


def run_release(options: ReleaseOptions, services: Services) -> ReleaseContext:
    """Execute the full release pipeline.

    Args:
        options: The release configuration, with the new version resolved.
        services: Project, git and index collaborators.

    Returns:
        The finished context: publish status, push result and step outcomes.

    Raises:
        StepExecutionError: If any step fails. Build and publish failures
            are rolled back first.
    """
    original_version = services.project.read_version()
    ctx = new_context(options, original_version)
    guard = RollbackGuard(
        lambda: rollback(services.project, services.git, original_version)
    )
    steps = build_steps(options, services, guard)

    with TerminationHandler(ctx, guard, preview=options.preview):
        run_steps(steps, ctx)

    if ctx.pushed is not None:
        print(f"\n✖ {ctx.pushed.reason}", file=sys.stderr)

    return ctx
