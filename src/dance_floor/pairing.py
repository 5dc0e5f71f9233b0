"""Classification, pairing and pose assignment.

Every decision that looks random is a hash of the song slot plus a purpose
tag, so the same roster and song always produce the same units while a new
song reshuffles everything.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, NamedTuple, Optional, Sequence

from dance_floor.config import (
    DEFAULT_CONFIG,
    DEFAULT_LAYOUT,
    DEFAULT_WEIGHTS,
    DancePartyConfig,
    PriorityWeights,
)
from dance_floor.hashing import hash_string, hash_unit, utf16_sort_key
from dance_floor.images import PAIRED_POOL, SOLO_POOL, solo_image_role
from dance_floor.models import DancerRow, DanceUnit
from dance_floor.priority import TimestampRange, compute_priority, get_timestamp_range
from dance_floor.song import get_song_slot

logger = logging.getLogger(__name__)

Pair = tuple[DancerRow, DancerRow]


class Pools(NamedTuple):
    leaders: list[DancerRow]
    followers: list[DancerRow]
    flex: list[DancerRow]


class PairingResult(NamedTuple):
    pairs: list[Pair]
    solos: list[DancerRow]


def classify_dancers(dancers: Sequence[DancerRow], song_slot: str) -> Pools:
    """Split dancers into leader, follower and flex pools.

    Dancers with an unknown role are sent to one side by hash, per song.
    """
    pools = Pools([], [], [])
    for dancer in dancers:
        if dancer.role == "lead":
            pools.leaders.append(dancer)
        elif dancer.role == "follow":
            pools.followers.append(dancer)
        elif dancer.role == "both":
            pools.flex.append(dancer)
        elif hash_string(song_slot + "\0unknown\0" + dancer.name) % 2 == 0:
            pools.leaders.append(dancer)
        else:
            pools.followers.append(dancer)
    return pools


def priority_shuffle(
    pool: Sequence[DancerRow],
    song_slot: str,
    timestamps: TimestampRange,
    weights: PriorityWeights = DEFAULT_WEIGHTS,
) -> list[DancerRow]:
    """Order a pool by priority plus a per-song jitter, highest first."""
    keyed = [
        (
            dancer,
            compute_priority(dancer, timestamps, weights)
            + hash_unit(song_slot + "\0jitter\0" + dancer.name) * weights.jitter_weight,
        )
        for dancer in pool
    ]
    keyed.sort(key=lambda item: item[1], reverse=True)
    return [dancer for dancer, _ in keyed]


def match_pairs(
    leaders: Sequence[DancerRow],
    followers: Sequence[DancerRow],
    flex: Sequence[DancerRow],
) -> PairingResult:
    """Pair leaders with followers, topping up from the flex pool.

    Queues are consumed front to front. Whichever side runs short borrows
    from flex, leftover flex dancers pair with each other, and anyone still
    unmatched becomes a solo (leaders, then followers, then flex).
    """
    lead_queue = list(leaders)
    follow_queue = list(followers)
    flex_queue = list(flex)
    pairs: list[Pair] = []

    matched = min(len(lead_queue), len(follow_queue))
    pairs.extend(zip(lead_queue[:matched], follow_queue[:matched]))
    del lead_queue[:matched]
    del follow_queue[:matched]

    while lead_queue and flex_queue:
        pairs.append((lead_queue.pop(0), flex_queue.pop(0)))
    while follow_queue and flex_queue:
        pairs.append((flex_queue.pop(0), follow_queue.pop(0)))
    while len(flex_queue) >= 2:
        pairs.append((flex_queue.pop(0), flex_queue.pop(0)))

    return PairingResult(pairs, lead_queue + follow_queue + flex_queue)


def balance_messages(
    pairs: Sequence[Pair],
    song_slot: str,
    message_balance_rate: float = DEFAULT_LAYOUT.message_balance_rate,
) -> list[Pair]:
    """Swap members so that message-less pairs borrow from message-rich ones.

    A pair where neither member left a message may, by hash roll, swap one
    side with a pair where both did. Each rich pair donates at most once.
    Rolls are keyed by the pair's index in ``pairs``.
    """
    result = list(pairs)
    if len(result) < 2 or message_balance_rate <= 0:
        return result

    donated: set[int] = set()
    for i, (leader, follower) in enumerate(result):
        if leader.wish or follower.wish:
            continue
        if hash_unit(song_slot + "\0msgbal\0" + str(i)) >= message_balance_rate:
            continue
        rich = [
            j
            for j, (rich_leader, rich_follower) in enumerate(result)
            if j != i and j not in donated and rich_leader.wish and rich_follower.wish
        ]
        if not rich:
            continue
        rich_idx = rich[hash_string(song_slot + "\0richpick\0" + str(i)) % len(rich)]
        rich_leader, rich_follower = result[rich_idx]
        if hash_string(song_slot + "\0swapside\0" + str(i)) % 2 == 0:
            result[i] = (rich_leader, follower)
            result[rich_idx] = (leader, rich_follower)
        else:
            result[i] = (leader, rich_follower)
            result[rich_idx] = (rich_leader, follower)
        donated.add(rich_idx)
    return result


def _roster_index(member: DancerRow, roster: Sequence[DancerRow]) -> Optional[int]:
    for idx, entry in enumerate(roster):
        if entry is member:
            return idx
    for idx, entry in enumerate(roster):
        if entry == member:
            return idx
    return None


def _member_label(member: DancerRow, roster: Sequence[DancerRow]) -> str:
    idx = _roster_index(member, roster)
    if idx is None:
        return member.name
    occurrence = sum(1 for entry in roster[: idx + 1] if entry.name == member.name)
    if occurrence > 1:
        return f"{member.name}#{occurrence}"
    return member.name


def build_unit_key(members: Sequence[DancerRow], roster: Sequence[DancerRow]) -> str:
    """Build the identity key of a unit from its members' names.

    The second and later roster entries sharing a name get a ``#N`` suffix,
    so keys stay unique when display names repeat.
    """
    labels = [_member_label(member, roster) for member in members]
    return "\0".join(sorted(labels, key=utf16_sort_key))


def assign_unique_image(
    song_slot: str,
    unit_key: str,
    pool: Sequence[int],
    used_images: AbstractSet[int],
) -> int:
    """Pick an image from ``pool`` for a unit, avoiding ``used_images``.

    Repeats are only allowed once every image in the pool has been used.
    """
    base_hash = hash_string(song_slot + "\0img\0" + unit_key)
    first_choice = pool[base_hash % len(pool)]
    if len(used_images) >= len(pool) or first_choice not in used_images:
        return first_choice

    for attempt in range(1, len(pool)):
        candidate = pool[
            hash_string(song_slot + "\0img\0" + unit_key + "\0" + str(attempt))
            % len(pool)
        ]
        if candidate not in used_images:
            return candidate

    start = base_hash % len(pool)
    for offset in range(len(pool)):
        candidate = pool[(start + offset) % len(pool)]
        if candidate not in used_images:
            return candidate
    return first_choice


def build_dance_units(
    dancers: Sequence[DancerRow],
    form_title: str,
    song_number: int,
    config: DancePartyConfig = DEFAULT_CONFIG,
) -> list[DanceUnit]:
    """Run classify, shuffle, match and balance, then build the units."""
    if not dancers:
        return []

    song_slot = get_song_slot(form_title, song_number)
    timestamps = get_timestamp_range(dancers)
    weights = config.weights

    pools = classify_dancers(dancers, song_slot)
    pairing = match_pairs(
        priority_shuffle(pools.leaders, song_slot, timestamps, weights),
        priority_shuffle(pools.followers, song_slot, timestamps, weights),
        priority_shuffle(pools.flex, song_slot, timestamps, weights),
    )
    pairs = balance_messages(
        pairing.pairs, song_slot, config.layout.message_balance_rate
    )

    units: list[DanceUnit] = []
    used_pair_images: set[int] = set()
    for leader, follower in pairs:
        unit_key = build_unit_key((leader, follower), dancers)
        image_num = assign_unique_image(
            song_slot, unit_key, PAIRED_POOL, used_pair_images
        )
        used_pair_images.add(image_num)
        units.append(
            DanceUnit(
                type="pair",
                members=(leader, follower),
                unit_key=unit_key,
                priority_score=max(
                    compute_priority(leader, timestamps, weights),
                    compute_priority(follower, timestamps, weights),
                ),
                image_num=image_num,
            )
        )

    used_solo_images: dict[str, set[int]] = {"lead": set(), "follow": set()}
    for solo in pairing.solos:
        unit_key = build_unit_key((solo,), dancers)
        used = used_solo_images[solo_image_role(solo)]
        image_num = assign_unique_image(song_slot, unit_key, SOLO_POOL, used)
        used.add(image_num)
        units.append(
            DanceUnit(
                type="solo",
                members=(solo,),
                unit_key=unit_key,
                priority_score=compute_priority(solo, timestamps, weights),
                image_num=image_num,
            )
        )

    logger.debug(
        "Built %d pairs and %d solos for %r song %d",
        len(pairs),
        len(pairing.solos),
        form_title,
        song_number,
    )
    return units
