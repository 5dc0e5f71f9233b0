"""Pose image pools and per-image metadata."""

from __future__ import annotations

from typing import Literal

from dance_floor.models import BubbleAlignment, DancerRow

ImageRole = Literal["both", "lead", "follow"]

# Connected dance-hold poses. Breakaway poses 1-6 only appear in ALL_BOTH_POOL.
PAIRED_POOL: tuple[int, ...] = tuple(range(7, 33))
ALL_BOTH_POOL: tuple[int, ...] = tuple(range(1, 33))
SOLO_POOL: tuple[int, ...] = tuple(range(1, 7))

# True when the leader figure is on the left of the unflipped image.
LEADER_ON_LEFT: dict[int, bool] = {
    1: True,
    2: False,
    3: False,
    4: False,
    5: True,
    6: True,
    7: True,
    8: False,
    9: False,
    10: False,
    11: True,
    12: True,
    13: False,
    14: True,
    15: False,
    16: True,
    17: True,
    18: True,
    19: True,
    20: True,
    21: False,
    22: True,
    23: True,
    24: True,
    25: True,
    26: True,
    27: True,
    28: True,
    29: True,
    30: True,
    31: True,
    32: True,
}

# Height normalization factors, median-targeted from content bounding boxes.
DANCER_SCALES: dict[ImageRole, dict[int, float]] = {
    "both": {
        1: 1.103,
        2: 1.133,
        3: 1.146,
        4: 1.075,
        5: 1.061,
        6: 1.09,
        7: 1.082,
        8: 1.02,
        9: 0.964,
        10: 0.882,
        11: 1.251,
        12: 1.111,
        13: 0.901,
        14: 1.201,
        15: 1.003,
        16: 1.026,
        17: 0.988,
        18: 1.166,
        19: 1.285,
        20: 0.929,
        21: 0.992,
        22: 1.057,
        23: 1.051,
        24: 1.223,
        25: 0.949,
        26: 1.169,
        27: 1.009,
        28: 1.158,
        29: 1.169,
        30: 1.131,
        31: 1.025,
        32: 0.981,
    },
    "lead": {
        1: 1.038,
        2: 1.018,
        3: 0.982,
        4: 0.938,
        5: 0.982,
        6: 1.057,
    },
    "follow": {
        1: 1.071,
        2: 1.01,
        3: 1.003,
        4: 0.991,
        5: 0.901,
        6: 0.997,
    },
}


def get_dancer_scale(role: ImageRole, image_num: int) -> float:
    """Look up the scale factor for an image, 1.0 when unknown."""
    return DANCER_SCALES.get(role, {}).get(image_num, 1.0)


def solo_image_role(dancer: DancerRow) -> ImageRole:
    """Return which solo image set a dancer draws from."""
    if dancer.role in ("lead", "unknown"):
        return "lead"
    return "follow"


def get_bubble_alignment(image_num: int, flipped: bool) -> BubbleAlignment:
    """Return which member of a pair renders on the left of its image."""
    leader_is_left = LEADER_ON_LEFT.get(image_num, True)
    if flipped:
        leader_is_left = not leader_is_left
    if leader_is_left:
        return BubbleAlignment(left_member="leader", right_member="follower")
    return BubbleAlignment(left_member="follower", right_member="leader")
