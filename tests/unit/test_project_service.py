"""Unit tests for ProjectApplicationService over an in-memory session."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

import pytest

from src.pv_common.datetime_utils import utc_now
from src.pv_common.enums import LedgerEntryType, ValidationRule, VoteOption
from src.pv_common.errors import (
    ForbiddenError,
    InputValidationError,
    InsufficientFundsError,
    ProjectNotFoundError,
    SettlementNotDoneError,
    SettlementRequiredError,
)
from src.pv_ledger.application.service import LedgerApplicationService
from src.pv_project.application.service import ProjectApplicationService
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity
from src.pv_settlement.application.service import SettlementService
from src.pv_voting.application.service import VotingService

SignIn = Callable[[str], Awaitable[UserIdentity]]


async def _balance(ctx: SessionContext, uid: str) -> int:
    return (await LedgerApplicationService(ctx).get_balance(uid)).balance


class TestCreateProject:
    async def test_escrows_max_points(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        result = await ProjectApplicationService(ctx).create_project(
            alice, "  Rain?  ", "Will it rain on Friday", tomorrow, 300
        )

        assert result.balance == 700
        assert result.project.title == "Rain?"
        assert result.project.frozen_points == 300
        assert result.project.remaining_yes == 300
        assert result.project.votes_yes == 0

        history = await LedgerApplicationService(ctx).get_history("alice")
        assert history.items[0].kind == LedgerEntryType.PROJECT_COST.value
        assert history.items[0].delta == -300
        assert history.items[0].description == "Create project - Rain?"

    async def test_newest_project_first(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        svc = ProjectApplicationService(ctx)
        first = await svc.create_project(alice, "First", "d", tomorrow, 10)
        second = await svc.create_project(alice, "Second", "d", tomorrow, 10)
        assert [p.id for p in ctx.state.projects] == [second.project.id, first.project.id]

    @pytest.mark.parametrize(
        ("title", "description", "delta", "max_points", "rule"),
        [
            ("   ", "desc", timedelta(days=1), 10, ValidationRule.TITLE_REQUIRED),
            ("x" * 12, "desc", timedelta(days=1), 10, ValidationRule.TITLE_TOO_LONG),
            ("Title", "", timedelta(days=1), 10, ValidationRule.DESCRIPTION_REQUIRED),
            ("Title", "d" * 101, timedelta(days=1), 10, ValidationRule.DESCRIPTION_TOO_LONG),
            ("Title", "desc", timedelta(seconds=-1), 10, ValidationRule.END_TIME_NOT_IN_FUTURE),
            ("Title", "desc", timedelta(days=1), 0, ValidationRule.MAX_POINTS_NOT_POSITIVE),
            ("Title", "desc", timedelta(days=1), -5, ValidationRule.MAX_POINTS_NOT_POSITIVE),
        ],
    )
    async def test_validation_rules(
        self,
        ctx: SessionContext,
        sign_in: SignIn,
        title: str,
        description: str,
        delta: timedelta,
        max_points: int,
        rule: ValidationRule,
    ) -> None:
        alice = await sign_in("alice")
        with pytest.raises(InputValidationError) as exc_info:
            await ProjectApplicationService(ctx).create_project(
                alice, title, description, utc_now() + delta, max_points
            )
        assert exc_info.value.rule is rule
        assert ctx.state.projects == []
        assert await _balance(ctx, "alice") == 1000

    async def test_eleven_character_title_accepted(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        result = await ProjectApplicationService(ctx).create_project(
            alice, "x" * 11, "d" * 100, tomorrow, 1
        )
        assert result.project.title == "x" * 11

    async def test_insufficient_funds(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        with pytest.raises(InsufficientFundsError):
            await ProjectApplicationService(ctx).create_project(alice, "Big", "d", tomorrow, 1001)
        assert ctx.state.projects == []
        assert await _balance(ctx, "alice") == 1000


class TestDeleteProject:
    async def test_unvoted_project_refunds_escrow(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)

        result = await svc.delete_project(alice, created.project.id)

        assert result.refunded_points == 300
        assert result.balance == 1000
        assert ctx.state.is_hidden("alice", created.project.id)
        # never physically removed
        assert ctx.state.find_project(created.project.id) is not None
        assert await svc.list_created_projects(alice) == []

    async def test_second_delete_releases_nothing(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        await svc.delete_project(alice, created.project.id)

        again = await svc.delete_project(alice, created.project.id)

        assert again.refunded_points == 0
        assert again.balance == 1000

    async def test_not_found(self, ctx: SessionContext, sign_in: SignIn) -> None:
        alice = await sign_in("alice")
        with pytest.raises(ProjectNotFoundError):
            await ProjectApplicationService(ctx).delete_project(alice, "404")

    async def test_only_creator_may_delete(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        created = await ProjectApplicationService(ctx).create_project(
            alice, "Rain?", "d", tomorrow, 300
        )
        with pytest.raises(ForbiddenError):
            await ProjectApplicationService(ctx).delete_project(bob, created.project.id)

    async def test_voted_project_requires_settlement(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        await VotingService(ctx).cast_vote(bob, created.project.id, VoteOption.YES, 10)

        with pytest.raises(SettlementRequiredError):
            await svc.delete_project(alice, created.project.id)
        assert await _balance(ctx, "alice") == 700

    async def test_delete_after_settlement_releases_retained_escrow(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        carol = await sign_in("carol")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Coin", "d", tomorrow, 100)
        pid = created.project.id
        voting = VotingService(ctx)
        # three equal stakes: each extra = floor(1/3 * 100) = 33, residual 1
        await voting.cast_vote(bob, pid, VoteOption.YES, 10)
        await voting.cast_vote(carol, pid, VoteOption.YES, 10)
        await voting.cast_vote(bob, pid, VoteOption.YES, 10)
        await SettlementService(ctx).publish_result(alice, pid, VoteOption.YES)

        result = await svc.delete_project(alice, pid)

        assert result.refunded_points == 1
        assert result.balance == 901


class TestHideParticipation:
    async def test_requires_published_result(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        created = await ProjectApplicationService(ctx).create_project(
            alice, "Rain?", "d", tomorrow, 300
        )
        with pytest.raises(SettlementNotDoneError):
            await ProjectApplicationService(ctx).hide_participation(bob, created.project.id)

    async def test_not_found(self, ctx: SessionContext, sign_in: SignIn) -> None:
        bob = await sign_in("bob")
        with pytest.raises(ProjectNotFoundError):
            await ProjectApplicationService(ctx).hide_participation(bob, "404")

    async def test_hides_from_participated_view_only(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        pid = created.project.id
        await VotingService(ctx).cast_vote(bob, pid, VoteOption.NO, 20)
        await SettlementService(ctx).publish_result(alice, pid, VoteOption.YES)
        balance_before = await _balance(ctx, "bob")

        await svc.hide_participation(bob, pid)

        assert await svc.list_participated_projects(bob) == []
        assert len(await svc.list_created_projects(alice)) == 1
        assert await _balance(ctx, "bob") == balance_before


class TestViews:
    async def test_list_open_excludes_settled_and_expired(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        open_one = await svc.create_project(alice, "Open", "d", tomorrow, 10)
        settled = await svc.create_project(alice, "Settled", "d", tomorrow, 10)
        await VotingService(ctx).cast_vote(bob, settled.project.id, VoteOption.YES, 1)
        await SettlementService(ctx).publish_result(alice, settled.project.id, VoteOption.YES)

        assert [p.id for p in await svc.list_open_projects()] == [open_one.project.id]

        later = ProjectApplicationService(ctx, clock=lambda: tomorrow + timedelta(seconds=1))
        assert await later.list_open_projects() == []

    async def test_participated_view_sums_my_votes(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        pid = created.project.id
        voting = VotingService(ctx)
        await voting.cast_vote(bob, pid, VoteOption.YES, 10)
        await voting.cast_vote(bob, pid, VoteOption.YES, 15)
        await voting.cast_vote(bob, pid, VoteOption.NO, 5)

        items = await svc.list_participated_projects(bob)

        assert len(items) == 1
        assert items[0].my_vote_count == 3
        assert items[0].my_yes_points == 25
        assert items[0].my_no_points == 5
        assert items[0].participant_count == 1
        assert await svc.list_participated_projects(alice) == []

    async def test_tallies_shown_only_to_creator(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        pid = created.project.id
        await VotingService(ctx).cast_vote(bob, pid, VoteOption.YES, 40)

        as_creator = await svc.get_project(alice, pid)
        as_voter = await svc.get_project(bob, pid)

        assert as_creator.votes_yes == 40
        assert as_voter.votes_yes is None
        assert as_voter.remaining_yes == 260
        assert as_voter.remaining_no == 300

    async def test_created_view_flags(
        self, ctx: SessionContext, sign_in: SignIn, tomorrow: datetime
    ) -> None:
        alice = await sign_in("alice")
        bob = await sign_in("bob")
        svc = ProjectApplicationService(ctx)
        created = await svc.create_project(alice, "Rain?", "d", tomorrow, 300)
        await VotingService(ctx).cast_vote(bob, created.project.id, VoteOption.YES, 1)

        [item] = await svc.list_created_projects(alice)

        assert item.can_publish is True
        assert item.can_delete is False
