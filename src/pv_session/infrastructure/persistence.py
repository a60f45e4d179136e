"""SessionRepository: maps SessionState to whole-value store records.

Record layout (one store key per logical collection):
  voting_projects        list of project records, newest first
  user_votes             list of vote-log records
  hidden_projects        list of "<uid>_<projectId>" strings
  current_user           {"uid": ..., "username": ...} or absent
  points_supply          {"granted": int, "withdrawn": int, "accounts": [uid, ...]}
  user_points:<uid>      int balance
  points_history:<uid>   list of history records, newest first

Project and history records use the camelCase field names of the existing
stored data, so previously saved collections load unchanged.
"""

import logging
from typing import Any

from src.pv_common.datetime_utils import parse_instant
from src.pv_common.enums import LedgerEntryType, ProjectStatus, VoteOption
from src.pv_common.errors import PersistenceError
from src.pv_common.points import coerce_points
from src.pv_ledger.domain.models import Ledger, LedgerEntry
from src.pv_project.domain.models import Project, UserVote, VoteRecord, VoteTally
from src.pv_session.domain.models import PointsSupply, SessionState, UserIdentity
from src.pv_store.domain.repository import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

PROJECTS_KEY = "voting_projects"
USER_VOTES_KEY = "user_votes"
HIDDEN_KEY = "hidden_projects"
CURRENT_USER_KEY = "current_user"
SUPPLY_KEY = "points_supply"


def balance_key(user_id: str) -> str:
    return f"user_points:{user_id}"


def history_key(user_id: str) -> str:
    return f"points_history:{user_id}"


# ---------------------------------------------------------------------------
# Record <-> domain mapping
# ---------------------------------------------------------------------------


def _entry_to_record(entry: LedgerEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "type": entry.kind.value,
        "points": entry.delta,
        "description": entry.description,
        "timestamp": entry.timestamp.isoformat(),
        "balance": entry.balance_after,
    }


def _record_to_entry(rec: dict[str, Any]) -> LedgerEntry:
    return LedgerEntry(
        id=int(rec["id"]),
        kind=LedgerEntryType(rec["type"]),
        delta=int(rec.get("points") or 0),
        description=rec.get("description") or "",
        timestamp=parse_instant(rec["timestamp"]),
        balance_after=coerce_points(rec.get("balance")),
    )


def _vote_to_record(vote: VoteRecord) -> dict[str, Any]:
    return {
        "voter": vote.voter,
        "option": vote.option.value,
        "points": vote.points,
        "timestamp": vote.timestamp.isoformat(),
    }


def _record_to_vote(rec: dict[str, Any]) -> VoteRecord:
    return VoteRecord(
        voter=rec["voter"],
        option=VoteOption(rec["option"]),
        points=int(rec["points"]),
        timestamp=parse_instant(rec["timestamp"]),
    )


def project_to_record(p: Project) -> dict[str, Any]:
    return {
        "id": p.id,
        "title": p.title,
        "description": p.description,
        "creatorId": p.creator_id,
        "creatorName": p.creator_name,
        "createdAt": p.created_at.isoformat(),
        "endTime": p.end_time.isoformat(),
        "maxPoints": p.max_points,
        "frozenPoints": p.frozen_points,
        "votes": {"yes": p.votes.yes, "no": p.votes.no},
        "voters": list(p.voters),
        "voteDetails": [_vote_to_record(v) for v in p.vote_details],
        "status": p.status.value,
        "result": p.result.value if p.result else None,
        "resultPublished": p.result_published,
        "forfeitedPoints": p.forfeited_points,
    }


def record_to_project(rec: dict[str, Any]) -> Project:
    # Older records may lack voteDetails/votes; default them to empty.
    votes = rec.get("votes") or {}
    result = rec.get("result")
    return Project(
        id=str(rec["id"]),
        title=rec["title"],
        description=rec.get("description") or "",
        creator_id=rec["creatorId"],
        creator_name=rec.get("creatorName") or rec["creatorId"],
        created_at=parse_instant(rec["createdAt"]),
        end_time=parse_instant(rec["endTime"]),
        max_points=int(rec["maxPoints"]),
        frozen_points=int(rec.get("frozenPoints") or 0),
        votes=VoteTally(yes=int(votes.get("yes") or 0), no=int(votes.get("no") or 0)),
        voters=list(rec.get("voters") or []),
        vote_details=[_record_to_vote(v) for v in rec.get("voteDetails") or []],
        status=ProjectStatus(rec.get("status") or ProjectStatus.ACTIVE.value),
        result=VoteOption(result) if result else None,
        result_published=bool(rec.get("resultPublished")),
        forfeited_points=int(rec.get("forfeitedPoints") or 0),
    )


def _user_vote_to_record(v: UserVote) -> dict[str, Any]:
    return {
        "projectId": v.project_id,
        "userId": v.user_id,
        "option": v.option.value,
        "points": v.points,
        "timestamp": v.timestamp.isoformat(),
    }


def _record_to_user_vote(rec: dict[str, Any]) -> UserVote:
    return UserVote(
        project_id=str(rec["projectId"]),
        user_id=rec["userId"],
        option=VoteOption(rec["option"]),
        points=int(rec["points"]),
        timestamp=parse_instant(rec["timestamp"]),
    )


def _hidden_to_record(hidden: set[tuple[str, str]]) -> list[str]:
    return sorted(f"{uid}_{pid}" for uid, pid in hidden)


def _record_to_hidden(items: list[str]) -> set[tuple[str, str]]:
    pairs = set()
    for item in items:
        # project ids never contain "_", user ids might
        uid, _, pid = item.rpartition("_")
        if uid and pid:
            pairs.add((uid, pid))
    return pairs


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SessionRepository:
    """Whole-collection load at session start; whole-collection save per mutation."""

    def __init__(self, store: KeyValueStoreProtocol, history_limit: int = 100) -> None:
        self._store = store
        self._history_limit = history_limit

    async def load_state(self) -> SessionState:
        try:
            projects = [record_to_project(r) for r in await self._get_list(PROJECTS_KEY)]
            user_votes = [
                _record_to_user_vote(r) for r in await self._get_list(USER_VOTES_KEY)
            ]
            hidden = _record_to_hidden(await self._get_list(HIDDEN_KEY))
            user_rec = await self._store.get(CURRENT_USER_KEY)
            supply_rec = await self._store.get(SUPPLY_KEY) or {}
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise PersistenceError(f"malformed stored record: {e}") from e
        if not isinstance(supply_rec, dict):
            raise PersistenceError(f"expected a mapping under '{SUPPLY_KEY}'")

        current_user = None
        if isinstance(user_rec, dict) and user_rec.get("uid"):
            current_user = UserIdentity(uid=user_rec["uid"], display_name=user_rec.get("username"))

        state = SessionState(
            current_user=current_user,
            projects=projects,
            user_votes=user_votes,
            hidden=hidden,
            supply=PointsSupply(
                granted=coerce_points(supply_rec.get("granted")),
                withdrawn=coerce_points(supply_rec.get("withdrawn")),
                accounts=[str(uid) for uid in supply_rec.get("accounts") or []],
            ),
        )
        logger.info(
            "Session loaded: projects=%d votes=%d hidden=%d user=%s",
            len(projects), len(user_votes), len(hidden),
            current_user.uid if current_user else None,
        )
        return state

    async def load_ledger(self, user_id: str) -> Ledger | None:
        """Return the stored ledger, or None if the user never had one."""
        raw_balance = await self._store.get(balance_key(user_id))
        raw_history = await self._store.get(history_key(user_id))
        if raw_balance is None and raw_history is None:
            return None

        balance = coerce_points(raw_balance)
        if raw_balance is not None and str(raw_balance).strip() != str(balance):
            logger.warning(
                "Corrupted balance for user %s (%r), treating as %d", user_id, raw_balance, balance
            )
        try:
            entries = [_record_to_entry(r) for r in raw_history or []]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise PersistenceError(f"malformed history for user {user_id}: {e}") from e
        return Ledger(
            user_id=user_id,
            balance=balance,
            entries=entries[: self._history_limit],
            history_limit=self._history_limit,
        )

    async def save(self, state: SessionState) -> None:
        """Write every collection and every loaded ledger in one atomic batch."""
        values: dict[str, Any] = {
            PROJECTS_KEY: [project_to_record(p) for p in state.projects],
            USER_VOTES_KEY: [_user_vote_to_record(v) for v in state.user_votes],
            HIDDEN_KEY: _hidden_to_record(state.hidden),
            SUPPLY_KEY: {
                "granted": state.supply.granted,
                "withdrawn": state.supply.withdrawn,
                "accounts": list(state.supply.accounts),
            },
        }
        if state.current_user is not None:
            values[CURRENT_USER_KEY] = {
                "uid": state.current_user.uid,
                "username": state.current_user.display_name,
            }
        for user_id, ledger in state.ledgers.items():
            if ledger.is_empty:
                continue
            values[balance_key(user_id)] = ledger.balance
            values[history_key(user_id)] = [_entry_to_record(e) for e in ledger.entries]
        await self._store.put_many(values)

    async def clear_current_user(self) -> None:
        await self._store.delete(CURRENT_USER_KEY)

    async def _get_list(self, key: str) -> list[Any]:
        value = await self._store.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise PersistenceError(f"expected a list under '{key}', got {type(value).__name__}")
        return value
