"""Standings derived from match records.

Nothing in here touches the database: every function takes already loaded
matches/participants (anything exposing the same attributes works) and
returns plain values, so the pairing generators and the lifecycle manager
share one definition of "points".
"""
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set


def score_value(score) -> float:
    """Contribution of a single score. Unset or non-numeric scores count as 0."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0.0
    if not math.isfinite(score):
        return 0.0
    return float(score)


def is_match_complete(match) -> bool:
    """Both sides scored. Byes are created already scored, so they are complete."""
    return all(
        not isinstance(s, bool) and isinstance(s, (int, float))
        for s in (match.score_a, match.score_b)
    )


def is_round_complete(matches: Iterable) -> bool:
    return all(is_match_complete(m) for m in matches)


@dataclass
class Standings:
    points: Dict[int, float] = field(default_factory=dict)
    played_pairs: Set[FrozenSet[int]] = field(default_factory=set)

    def points_for(self, participant_id: int) -> float:
        return self.points.get(participant_id, 0.0)

    def have_played(self, first_id: int, second_id: int) -> bool:
        return frozenset((first_id, second_id)) in self.played_pairs


def compute_standings(matches: Iterable, participant_ids: Iterable[int] = ()) -> Standings:
    standings = Standings(points={pid: 0.0 for pid in participant_ids})

    for match in matches:
        if match.player_a_id is not None:
            standings.points[match.player_a_id] = standings.points_for(match.player_a_id) + score_value(match.score_a)
        if match.player_b_id is not None:
            standings.points[match.player_b_id] = standings.points_for(match.player_b_id) + score_value(match.score_b)
        if match.player_a_id is not None and match.player_b_id is not None:
            standings.played_pairs.add(frozenset((match.player_a_id, match.player_b_id)))

    return standings


def ranking_key(participant, standings: Standings):
    # points desc, then fewest byes, then earliest join
    return (
        -standings.points_for(participant.id),
        participant.bye_count or 0,
        participant.created_at,
        participant.id,
    )


def rank_participants(participants: Sequence, standings: Standings) -> List:
    return sorted(participants, key=lambda p: ranking_key(p, standings))


def pick_winner(participants: Sequence, standings: Standings) -> Optional[int]:
    """Strictly highest total wins; on a tie the earliest joiner keeps the lead.

    ``participants`` must already be in join order.
    """
    winner_id = None
    best = None
    for participant in participants:
        pts = standings.points_for(participant.id)
        if best is None or pts > best:
            best = pts
            winner_id = participant.id
    return winner_id
