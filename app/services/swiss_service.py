"""Swiss pairing, one round at a time.

Participants are ranked by points (desc), bye count (asc) and join time
(asc), then paired greedily from the top, avoiding opponents already met.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from app.models.round_plan import PlannedMatch
from app.services.standings_service import Standings, ranking_key

logger = logging.getLogger(__name__)


@dataclass
class SwissEntry:
    participant_id: int
    points: float
    bye_count: int
    created_at: Optional[datetime] = None


def build_swiss_pool(participants: Sequence, standings: Standings) -> List[SwissEntry]:
    ranked = sorted(participants, key=lambda p: ranking_key(p, standings))
    return [
        SwissEntry(
            participant_id=p.id,
            points=standings.points_for(p.id),
            bye_count=p.bye_count or 0,
            created_at=p.created_at,
        )
        for p in ranked
    ]


def _choose_bye(pool: List[SwissEntry], leftover: SwissEntry) -> SwissEntry:
    """Steer the bye onto the lowest-scoring player who never had one, if they trail the leftover."""
    candidates = [
        e for e in pool
        if e is not leftover and e.bye_count == 0 and e.points < leftover.points
    ]
    if not candidates:
        return leftover
    # min() keeps the first of equal candidates, i.e. the best ranked one
    return min(candidates, key=lambda e: e.points)


def pair_swiss_round(pool: List[SwissEntry], standings: Standings) -> List[PlannedMatch]:
    """Pair an already ranked pool. Every entry appears exactly once in the result."""
    pairs: List[List[SwissEntry]] = []
    remaining = list(pool)

    while len(remaining) > 1:
        top = remaining.pop(0)
        idx = next(
            (i for i, opponent in enumerate(remaining)
             if not standings.have_played(top.participant_id, opponent.participant_id)),
            None,
        )
        if idx is None:
            # Everybody left has already met ``top``; accept the repeat
            idx = 0
            logger.warning(
                "Swiss repeat pairing: %s vs %s (no unplayed opponent left)",
                top.participant_id, remaining[0].participant_id,
            )
        pairs.append([top, remaining.pop(idx)])

    planned = []
    bye_entry = None
    if remaining:
        leftover = remaining[0]
        bye_entry = _choose_bye(pool, leftover)
        if bye_entry is not leftover:
            # The chosen player gives up their board to the leftover
            for pair in pairs:
                if bye_entry in pair:
                    pair[pair.index(bye_entry)] = leftover
                    break
            logger.warning(
                "Bye moved from %s to %s (%.1f pts, no previous bye)",
                leftover.participant_id, bye_entry.participant_id, bye_entry.points,
            )

    for first, second in pairs:
        planned.append(PlannedMatch.pairing(first.participant_id, second.participant_id))
    if bye_entry is not None:
        planned.append(PlannedMatch.bye(bye_entry.participant_id))

    return planned
