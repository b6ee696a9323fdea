"""Round-robin scheduling with the circle method.

The whole schedule is computed up front from the participants in join order;
the round controller only persists one round of it at a time.
"""
import random
from typing import List, Optional, Sequence, Tuple

from app.models.round_plan import PlannedMatch

Pair = Tuple[Optional[int], Optional[int]]


def round_robin_round_count(num_participants: int) -> int:
    if num_participants < 2:
        return 0
    # Odd cohorts are padded with a bye slot
    padded = num_participants + (num_participants % 2)
    return padded - 1


def generate_round_robin_schedule(participant_ids: Sequence[int]) -> List[List[Pair]]:
    """Return every round as a list of pairs. ``None`` in a pair is the bye slot."""
    slots: List[Optional[int]] = list(participant_ids)
    if len(slots) < 2:
        return []
    if len(slots) % 2 == 1:
        slots.append(None)

    n = len(slots)
    rounds: List[List[Pair]] = []
    for _ in range(n - 1):
        rounds.append([(slots[i], slots[n - 1 - i]) for i in range(n // 2)])
        # Keep the first slot fixed, move the last one to position 1
        slots.insert(1, slots.pop())
    return rounds


def plan_round_robin_round(pairs: Sequence[Pair], rng: Optional[random.Random] = None) -> List[PlannedMatch]:
    """Turn one scheduled round into planned matches.

    Sides of a real pairing are assigned by ``rng`` so neither schedule
    position is systematically player A.
    """
    rng = rng or random.Random()
    planned: List[PlannedMatch] = []

    for first, second in pairs:
        if first is None and second is None:
            continue
        if first is None or second is None:
            planned.append(PlannedMatch.bye(first if first is not None else second))
            continue

        if rng.random() < 0.5:
            first, second = second, first
        planned.append(PlannedMatch.pairing(first, second))

    return planned
