"""Points invariants: per-project escrow checks and global conservation (INV-G).

INV-1: frozen_points >= 0
INV-2: votes.yes <= max_points and votes.no <= max_points
INV-3: votes[option] == sum of vote_details stakes for that option
INV-G: sum(balances) + sum(frozen_points) + sum(open stakes)
       + sum(forfeited_points) + withdrawn == granted
"""

import logging

from src.pv_common.enums import VoteOption
from src.pv_project.domain.models import Project
from src.pv_session.domain.models import SessionState

logger = logging.getLogger(__name__)


def verify_project_invariants(project: Project) -> list[str]:
    violations: list[str] = []
    if project.frozen_points < 0:
        violations.append(f"INV-1 violated: project={project.id} frozen={project.frozen_points}")
    for option in VoteOption:
        tally = project.votes.get(option)
        if tally > project.max_points:
            violations.append(
                f"INV-2 violated: project={project.id} {option.value}={tally} "
                f"> max_points={project.max_points}"
            )
        staked = sum(v.points for v in project.vote_details if v.option is option)
        if tally != staked:
            violations.append(
                f"INV-3 violated: project={project.id} {option.value} tally={tally} "
                f"!= staked={staked}"
            )
    return violations


def verify_points_conservation(state: SessionState) -> list[str]:
    """Check INV-G over every ledger currently loaded in `state`.

    The caller must load the ledger of every uid in state.supply.accounts first.
    """
    balances = sum(ledger.balance for ledger in state.ledgers.values())
    frozen = sum(p.frozen_points for p in state.projects)
    open_stakes = sum(p.open_stake for p in state.projects)
    forfeited = sum(p.forfeited_points for p in state.projects)
    withdrawn = state.supply.withdrawn

    held = balances + frozen + open_stakes + forfeited + withdrawn
    if held == state.supply.granted:
        logger.debug("INV-G OK: granted=%d", held)
        return []
    msg = (
        f"INV-G violated: balances({balances}) + frozen({frozen}) + open_stakes({open_stakes}) "
        f"+ forfeited({forfeited}) + withdrawn({withdrawn}) = {held} "
        f"!= granted={state.supply.granted}"
    )
    logger.error(msg)
    return [msg]
