"""Tests for GitFlow session operations against a scripted repository."""

from __future__ import annotations

import pytest

from flowkit.core.result import Err, GitError, Ok
from flowkit.flow.ops import GitFlow
from flowkit.flow.types import BranchType, ClassifiedRef
from tests.mocks.fake_repo import FakeRepo

LIST_FEATURES = ("flow", "feature")


@pytest.fixture
def repo() -> FakeRepo:
    return FakeRepo()


class TestInitialisation:
    @pytest.mark.asyncio
    async def test_initialised_when_master_branch_configured(self, repo: FakeRepo) -> None:
        repo.respond(("config", "--get", "gitflow.branch.master"), stdout="main\n")

        assert await GitFlow(repo).is_initialised()

    @pytest.mark.asyncio
    async def test_not_initialised_when_config_missing(self, repo: FakeRepo) -> None:
        repo.respond(("config", "--get", "gitflow.branch.master"), code=1)

        assert not await GitFlow(repo).is_initialised()

    @pytest.mark.asyncio
    async def test_not_initialised_when_value_blank(self, repo: FakeRepo) -> None:
        repo.respond(("config", "--get", "gitflow.branch.master"), stdout="  \n")

        assert not await GitFlow(repo).is_initialised()


class TestListBranches:
    @pytest.mark.asyncio
    async def test_parses_git_flow_output(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="  login\n* dark-mode\n")

        result = await GitFlow(repo).list_branches(BranchType.FEATURE)

        assert result == Ok(["login", "dark-mode"])

    @pytest.mark.asyncio
    async def test_failure_yields_empty_list(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="", stderr="Not a gitflow-enabled repo yet.", code=1)

        result = await GitFlow(repo).list_branches(BranchType.FEATURE)

        assert result == Ok([])

    @pytest.mark.asyncio
    async def test_memoised_per_type(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        repo.respond(("flow", "hotfix"), stdout="1.0.1\n")
        flow = GitFlow(repo)

        await flow.list_branches(BranchType.FEATURE)
        await flow.list_branches(BranchType.FEATURE)
        await flow.list_branches(BranchType.HOTFIX)

        assert repo.count(LIST_FEATURES) == 1
        assert repo.count(("flow", "hotfix")) == 1

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        flow = GitFlow(repo)
        await flow.list_branches(BranchType.FEATURE)

        repo.respond(LIST_FEATURES, stdout="login\nsignup\n")
        flow.invalidate(BranchType.FEATURE)

        assert await flow.list_branches(BranchType.FEATURE) == Ok(["login", "signup"])
        assert repo.count(LIST_FEATURES) == 2

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        flow = GitFlow(repo)

        first = (await flow.list_branches(BranchType.FEATURE)).unwrap()
        first.append("tampered")

        assert (await flow.list_branches(BranchType.FEATURE)).unwrap() == ["login"]

    @pytest.mark.asyncio
    async def test_process_error_is_not_cached(self, repo: FakeRepo) -> None:
        repo.fail_with(LIST_FEATURES, GitError("git executable not found on PATH"))
        flow = GitFlow(repo)

        result = await flow.list_branches(BranchType.FEATURE)

        assert isinstance(result, Err)
        await flow.list_branches(BranchType.FEATURE)
        assert repo.count(LIST_FEATURES) == 2


class TestCurrentHead:
    @pytest.mark.asyncio
    async def test_classifies_flow_branch(self, repo: FakeRepo) -> None:
        repo.respond(("symbolic-ref", "--quiet", "HEAD"), stdout="refs/heads/hotfix/1.2.1\n")

        head = await GitFlow(repo).current_head()

        assert head.ref == "refs/heads/hotfix/1.2.1"
        assert head.short_ref == "hotfix/1.2.1"
        assert head.classified == ClassifiedRef(BranchType.HOTFIX, "1.2.1")

    @pytest.mark.asyncio
    async def test_develop_is_not_classified(self, repo: FakeRepo) -> None:
        repo.respond(("symbolic-ref", "--quiet", "HEAD"), stdout="refs/heads/develop\n")

        head = await GitFlow(repo).current_head()

        assert head.short_ref == "develop"
        assert head.classified is None
        assert not head.detached

    @pytest.mark.asyncio
    async def test_detached_head(self, repo: FakeRepo) -> None:
        repo.respond(("symbolic-ref", "--quiet", "HEAD"), code=1)

        head = await GitFlow(repo).current_head()

        assert head.detached
        assert head.classified is None


class TestRun:
    @pytest.mark.asyncio
    async def test_start_runs_command_and_invalidates_type(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        repo.respond(("flow", "feature", "start", "signup", "develop"), stdout="Switched\r\n")
        flow = GitFlow(repo)
        await flow.list_branches(BranchType.FEATURE)

        outcome = (await flow.start(BranchType.FEATURE, "signup", "develop")).unwrap()

        assert outcome.succeeded
        assert outcome.output == "Switched\n"
        await flow.list_branches(BranchType.FEATURE)
        assert repo.count(LIST_FEATURES) == 2

    @pytest.mark.asyncio
    async def test_failed_finish_keeps_cache(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        repo.respond(
            ("flow", "feature", "finish", "login"), stderr="Fatal: merge conflict", code=1
        )
        flow = GitFlow(repo)
        await flow.list_branches(BranchType.FEATURE)

        outcome = (await flow.finish(BranchType.FEATURE, "login")).unwrap()

        assert not outcome.succeeded
        assert outcome.exit_code == 1
        assert "merge conflict" in outcome.output
        await flow.list_branches(BranchType.FEATURE)
        assert repo.count(LIST_FEATURES) == 1

    @pytest.mark.asyncio
    async def test_output_combines_stdout_and_stderr(self, repo: FakeRepo) -> None:
        repo.respond(
            ("flow", "release", "finish", "-p", "1.0"),
            stdout="Summary of actions:\r\n",
            stderr="Pushed tags\r",
        )

        outcome = (
            await GitFlow(repo).finish(BranchType.RELEASE, "1.0", push=True)
        ).unwrap()

        assert outcome.output == "Summary of actions:\nPushed tags\n"

    @pytest.mark.asyncio
    async def test_pull_and_publish_args(self, repo: FakeRepo) -> None:
        repo.respond(("flow", "bugfix", "publish", "crash"))
        repo.respond(("flow", "bugfix", "pull", "origin", "crash"))
        flow = GitFlow(repo)

        assert (await flow.publish(BranchType.BUGFIX, "crash")).unwrap().succeeded
        assert (await flow.pull(BranchType.BUGFIX, "origin", "crash")).unwrap().succeeded

    @pytest.mark.asyncio
    async def test_process_error_propagates(self, repo: FakeRepo) -> None:
        repo.fail_with(("flow", "init", "-d"), GitError("git timed out"))

        result = await GitFlow(repo).init()

        match result:
            case Err(err):
                assert err.message == "git timed out"
            case Ok(_):
                pytest.fail("expected Err")


class TestDryRun:
    @pytest.mark.asyncio
    async def test_mutating_commands_are_skipped(self, repo: FakeRepo) -> None:
        flow = GitFlow(repo, dry_run=True)

        outcome = (await flow.start(BranchType.RELEASE, "2.0")).unwrap()

        assert outcome.skipped
        assert outcome.command.display == "git flow release start 2.0"
        assert repo.calls == []

    @pytest.mark.asyncio
    async def test_listing_still_runs(self, repo: FakeRepo) -> None:
        repo.respond(("flow", "support"), stdout="1.x\n")
        flow = GitFlow(repo, dry_run=True)

        assert await flow.list_branches(BranchType.SUPPORT) == Ok(["1.x"])
        assert repo.calls == [("flow", "support")]

    @pytest.mark.asyncio
    async def test_skipped_start_keeps_cache(self, repo: FakeRepo) -> None:
        repo.respond(LIST_FEATURES, stdout="login\n")
        flow = GitFlow(repo, dry_run=True)
        await flow.list_branches(BranchType.FEATURE)

        await flow.start(BranchType.FEATURE, "signup")
        await flow.list_branches(BranchType.FEATURE)

        assert repo.count(LIST_FEATURES) == 1
