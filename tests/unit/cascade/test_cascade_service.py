"""Tests for the cascade walk using fake collaborators."""
from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from helpers.cascade import vendor_yml


@pytest.fixture
def chain(make_sibling, sibling_root: Path) -> Path:
    """app -> lib -> util, plus an independent docs project."""
    make_sibling("util")
    make_sibling("lib", vendor_yml("https://github.com/org/util.git"))
    make_sibling("app", vendor_yml("https://github.com/org/lib.git"))
    make_sibling("docs")
    return sibling_root


@pytest.fixture
def service(chain: Path, fake_puller, fake_executor, fake_review_cli):
    from gitvendor.core.cascade import CascadeService
    from gitvendor.core.config import load_cascade_defaults

    return CascadeService(
        chain,
        puller=fake_puller,
        executor=fake_executor,
        review_cli=fake_review_cli,
        defaults=load_cascade_defaults(environ={}),
        today=lambda: date(2024, 5, 17),
    )


class TestCascadeWalk:
    def test_pulls_in_dependency_order(self, service, fake_puller) -> None:
        """Dependencies are pulled before their dependents."""
        from gitvendor.core.cascade import CascadeOptions

        result = service.cascade(CascadeOptions())

        assert result.order == ["docs", "util", "lib", "app"]
        assert fake_puller.calls == ["docs", "util", "lib", "app"]
        assert result.ok

    def test_updated_and_current_partition_pulled_projects(self, service, fake_puller) -> None:
        """Pulled projects are either updated or current."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"lib": 3, "app": 1}

        result = service.cascade(CascadeOptions())

        assert result.updated == ["lib", "app"]
        assert result.current == ["docs", "util"]
        assert set(result.updated).isdisjoint(result.current)
        assert result.project_results["lib"].pull_result.changed_files == 3

    def test_pull_failure_recorded_and_walk_continues(self, service, fake_puller) -> None:
        """A pull failure is recorded and later projects still run."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.errors = {"lib": "network down"}

        result = service.cascade(CascadeOptions())

        assert fake_puller.calls == ["docs", "util", "lib", "app"]
        assert [(f.project, f.phase, f.error) for f in result.failed] == [("lib", "pull", "network down")]
        assert "lib" not in result.updated and "lib" not in result.current
        assert result.project_results["lib"].error == "network down"
        assert "app" in result.current

    def test_no_verify_no_commit_runs_nothing_else(self, service, fake_executor) -> None:
        """Without verify or commit only the puller runs."""
        from gitvendor.core.cascade import CascadeOptions

        service.cascade(CascadeOptions())

        assert fake_executor.calls == []
        assert fake_executor.shell_calls == []

    def test_empty_root_returns_empty_result(
        self, sibling_root: Path, fake_puller, fake_executor, fake_review_cli
    ) -> None:
        """An empty root gives an empty result."""
        from gitvendor.core.cascade import CascadeOptions, CascadeService
        from gitvendor.core.config import load_cascade_defaults

        svc = CascadeService(
            sibling_root,
            puller=fake_puller,
            executor=fake_executor,
            defaults=load_cascade_defaults(environ={}),
        )
        result = svc.cascade(CascadeOptions(commit=True, verify=True))

        assert result.order == [] and result.failed == [] and result.project_results == {}
        assert fake_puller.calls == []

    def test_cycle_aborts_before_any_pull(self, make_sibling, sibling_root: Path, fake_puller, fake_executor) -> None:
        """A cycle raises before anything is pulled."""
        from gitvendor.core.cascade import CascadeCycleError, CascadeOptions, CascadeService
        from gitvendor.core.config import load_cascade_defaults

        make_sibling("a", vendor_yml("../b"))
        make_sibling("b", vendor_yml("../c"))
        make_sibling("c", vendor_yml("../a"))
        make_sibling("d")
        svc = CascadeService(
            sibling_root,
            puller=fake_puller,
            executor=fake_executor,
            defaults=load_cascade_defaults(environ={}),
        )

        with pytest.raises(CascadeCycleError) as excinfo:
            svc.cascade(CascadeOptions())

        assert excinfo.value.nodes == ["a", "b", "c"]
        assert fake_puller.calls == []

    def test_missing_root_is_fatal(self, tmp_path: Path, fake_puller, fake_executor) -> None:
        """A missing root raises CascadeDiscoveryError."""
        from gitvendor.core.cascade import CascadeDiscoveryError, CascadeOptions, CascadeService
        from gitvendor.core.config import load_cascade_defaults

        svc = CascadeService(
            tmp_path / "missing",
            puller=fake_puller,
            executor=fake_executor,
            defaults=load_cascade_defaults(environ={}),
        )
        with pytest.raises(CascadeDiscoveryError):
            svc.cascade(CascadeOptions())


class TestOptionValidation:
    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"pr": True, "push": True, "commit": True}, "--pr and --push are mutually exclusive"),
            ({"pr": True, "push": True}, "--pr and --push are mutually exclusive"),
            ({"push": True}, "--push requires --commit"),
        ],
    )
    def test_invalid_combinations_rejected_before_any_work(
        self, service, fake_puller, fake_executor, kwargs, message
    ) -> None:
        """Invalid flag combinations fail before any pull."""
        from gitvendor.core.cascade import CascadeOptions, CascadeOptionsError

        with pytest.raises(CascadeOptionsError) as excinfo:
            service.cascade(CascadeOptions(**kwargs))

        assert str(excinfo.value) == message
        assert fake_puller.calls == []
        assert fake_executor.calls == []

    def test_dry_run_still_validates(self, service) -> None:
        """Dry runs validate options too."""
        from gitvendor.core.cascade import CascadeOptions, CascadeOptionsError

        with pytest.raises(CascadeOptionsError):
            service.cascade(CascadeOptions(dry_run=True, push=True))

    def test_options_error_is_a_value_error(self) -> None:
        """CascadeOptionsError is a ValueError."""
        from gitvendor.core.cascade import CascadeOptions

        with pytest.raises(ValueError):
            CascadeOptions(push=True).validate()


class TestDryRun:
    def test_reports_order_without_touching_anything(
        self, service, chain: Path, fake_puller, fake_executor, fake_review_cli
    ) -> None:
        """A dry run reports the order and runs nothing."""
        from gitvendor.core.cascade import CascadeOptions

        result = service.cascade(CascadeOptions(dry_run=True, verify=True, commit=True, push=True))

        assert result.order == ["docs", "util", "lib", "app"]
        assert list(result.project_results) == result.order
        assert result.project_results["app"].dir == (chain / "app").resolve()
        assert result.project_results["app"].pull_result is None
        assert result.updated == [] and result.current == [] and result.failed == []
        assert fake_puller.calls == []
        assert fake_executor.calls == [] and fake_executor.shell_calls == []
        assert fake_review_cli.created == []


class TestCancellation:
    def test_cancel_before_start_marks_every_project(self, service, fake_puller) -> None:
        """A token cancelled up front fails every project as cancelled."""
        from gitvendor.core.cascade import CancellationToken, CascadeOptions

        token = CancellationToken()
        token.cancel()

        result = service.cascade(CascadeOptions(), token)

        assert fake_puller.calls == []
        assert [(f.project, f.phase, f.error) for f in result.failed] == [
            ("docs", "pull", "cancelled"),
            ("util", "pull", "cancelled"),
            ("lib", "pull", "cancelled"),
            ("app", "pull", "cancelled"),
        ]

    def test_cancel_mid_walk_finishes_current_project(self, service, fake_puller, fake_executor) -> None:
        """Cancelling mid-walk lets the current project finish."""
        from gitvendor.core.cascade import CancellationToken, CascadeOptions

        token = CancellationToken()

        def _cancel_on_util(name: str) -> None:
            if name == "util":
                token.cancel()

        fake_puller.on_pull = _cancel_on_util

        result = service.cascade(CascadeOptions(verify=True), token)

        assert fake_puller.calls == ["docs", "util"]
        assert [name for name, _ in fake_executor.shell_calls] == ["docs", "util"]
        assert result.current == ["docs", "util"]
        assert [f.project for f in result.failed] == ["lib", "app"]
        assert all(f.phase == "pull" for f in result.failed)


class TestVerify:
    def test_default_command_runs_in_each_project(self, service, fake_executor) -> None:
        """The default verify command runs in every project."""
        from gitvendor.core.cascade import CascadeOptions

        result = service.cascade(CascadeOptions(verify=True))

        assert fake_executor.shell_calls == [
            ("docs", "go build ./..."),
            ("util", "go build ./..."),
            ("lib", "go build ./..."),
            ("app", "go build ./..."),
        ]
        assert all(r.verify_passed for r in result.project_results.values())
        assert result.project_results["app"].verify_output == "ran go build ./...\n"

    def test_project_verify_command_overrides_default(
        self, make_sibling, service, fake_executor
    ) -> None:
        """A project's verify_command replaces the default."""
        from gitvendor.core.cascade import CascadeOptions

        make_sibling(
            "docs",
            vendor_yml(cascade="""
            cascade:
              verify_command: mkdocs build --strict
            """),
        )

        service.cascade(CascadeOptions(verify=True))

        assert dict(fake_executor.shell_calls)["docs"] == "mkdocs build --strict"
        assert dict(fake_executor.shell_calls)["app"] == "go build ./..."

    def test_explicit_override_wins(self, make_sibling, service, fake_executor) -> None:
        """verify_command from options beats project settings."""
        from gitvendor.core.cascade import CascadeOptions

        make_sibling(
            "docs",
            vendor_yml(cascade="""
            cascade:
              verify_command: mkdocs build --strict
            """),
        )

        service.cascade(CascadeOptions(verify=True, verify_command="make check"))

        assert {cmd for _, cmd in fake_executor.shell_calls} == {"make check"}

    def test_env_override_changes_default(
        self, chain: Path, fake_puller, fake_executor
    ) -> None:
        """GITVENDOR_CASCADE__VERIFY_COMMAND changes the default."""
        from gitvendor.core.cascade import CascadeOptions, CascadeService
        from gitvendor.core.config import load_cascade_defaults

        defaults = load_cascade_defaults(environ={"GITVENDOR_CASCADE__VERIFY_COMMAND": "make test"})
        svc = CascadeService(chain, puller=fake_puller, executor=fake_executor, defaults=defaults)

        svc.cascade(CascadeOptions(verify=True))

        assert {cmd for _, cmd in fake_executor.shell_calls} == {"make test"}

    def test_verify_failure_skips_publish_for_that_project(self, service, fake_executor) -> None:
        """A failed verify skips commit for that project only."""
        from gitvendor.core.cascade import CascadeOptions

        fake_executor.fail_when(lambda name, argv: name == "lib" and argv[0] == "<shell>", "compile error")

        result = service.cascade(CascadeOptions(verify=True, commit=True))

        assert [(f.project, f.phase) for f in result.failed] == [("lib", "verify")]
        assert result.project_results["lib"].verify_passed is False
        assert result.project_results["lib"].verify_output == "compile error"
        assert fake_executor.git_calls("lib") == []
        assert fake_executor.git_calls("app") != []
        # A verify failure still counts as pulled.
        assert "lib" in result.current


class TestDirectCommit:
    def test_commit_runs_add_then_commit(self, service, fake_puller, fake_executor) -> None:
        """Commit stages everything then commits with the cascade message."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"app": 2}

        result = service.cascade(CascadeOptions(commit=True))

        calls = fake_executor.git_calls("app")
        assert calls[0] == ["add", "-A"]
        assert calls[1][:3] == ["commit", "--no-verify", "-m"]
        assert calls[1][3].startswith("chore(vendor): cascade pull")
        assert "Tags: vendor.cascade" in calls[1][3]
        assert ["push"] not in calls
        assert result.ok

    def test_commit_failure_without_changes_is_silent(self, service, fake_executor) -> None:
        """Nothing to commit after an unchanged pull is not a failure."""
        from gitvendor.core.cascade import CascadeOptions

        fake_executor.fail_when(lambda name, argv: argv[:2] == ["git", "commit"], "nothing to commit")

        result = service.cascade(CascadeOptions(commit=True, push=True))

        assert result.failed == []
        assert all(["push"] not in fake_executor.git_calls(n) for n in result.order)

    def test_commit_failure_with_changes_is_recorded(self, service, fake_puller, fake_executor) -> None:
        """A commit failure after changes is recorded and push is skipped."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"lib": 1}
        fake_executor.fail_when(lambda name, argv: argv[:2] == ["git", "commit"], "hook rejected")

        result = service.cascade(CascadeOptions(commit=True, push=True))

        assert [(f.project, f.phase) for f in result.failed] == [("lib", "commit")]
        assert ["push"] not in fake_executor.git_calls("lib")

    def test_add_failure_is_prefixed(self, service, fake_puller, fake_executor) -> None:
        """git add errors are prefixed with the command."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"util": 1}
        fake_executor.fail_when(lambda name, argv: name == "util" and argv[:2] == ["git", "add"], "index.lock")

        result = service.cascade(CascadeOptions(commit=True))

        assert len(result.failed) == 1
        assert result.failed[0].error.startswith("git add: ")

    def test_push_after_commit(self, service, fake_puller, fake_executor) -> None:
        """--push pushes after the commit."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"app": 1}

        service.cascade(CascadeOptions(commit=True, push=True))

        assert fake_executor.git_calls("app")[-1] == ["push"]

    def test_push_failure_recorded(self, service, fake_puller, fake_executor) -> None:
        """A push failure is recorded; the project stays updated."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"app": 1}
        fake_executor.fail_when(lambda name, argv: name == "app" and argv[:2] == ["git", "push"], "rejected")

        result = service.cascade(CascadeOptions(commit=True, push=True))

        assert [(f.project, f.phase, f.error) for f in result.failed] == [("app", "push", "rejected")]
        assert "app" in result.updated


class TestPullRequestMode:
    def test_pr_flow_on_dated_branch(self, service, fake_puller, fake_executor, fake_review_cli) -> None:
        """PR mode commits on a dated branch and opens a PR."""
        from gitvendor.core.cascade import CascadeOptions

        fake_puller.changes = {"app": 1}

        result = service.cascade(CascadeOptions(pr=True))

        branch = "vendor-cascade/app/2024-05-17"
        calls = fake_executor.git_calls("app")
        assert calls[0] == ["rev-parse", "--abbrev-ref", "HEAD"]
        assert calls[1] == ["checkout", "-b", branch]
        assert calls[2] == ["add", "-A"]
        assert calls[3][0] == "commit"
        assert calls[4] == ["push", "-u", "origin", branch]
        assert calls[-1] == ["checkout", "main"]
        assert result.project_results["app"].pr_info == "https://github.com/org/app/pull/1"
        created = [c for c in fake_review_cli.created if c["dir"] == "app"]
        assert created[0]["branch"] == branch
        assert "`app`" in created[0]["body"]

    def test_pr_mode_implies_commit(self, service, fake_executor) -> None:
        """PR mode commits even without --commit."""
        from gitvendor.core.cascade import CascadeOptions

        service.cascade(CascadeOptions(pr=True, commit=False))

        assert ["add", "-A"] in fake_executor.git_calls("docs")
