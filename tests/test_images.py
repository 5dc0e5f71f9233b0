"""Tests for image pools and metadata."""

from __future__ import annotations

from dance_floor import images
from dance_floor.models import DancerRow


def test_pools() -> None:
    assert images.PAIRED_POOL[0] == 7 and images.PAIRED_POOL[-1] == 32
    assert len(images.PAIRED_POOL) == 26
    assert images.SOLO_POOL == (1, 2, 3, 4, 5, 6)
    assert set(images.ALL_BOTH_POOL) == set(images.SOLO_POOL) | set(images.PAIRED_POOL)


def test_bubble_alignment_follows_image_and_flip() -> None:
    plain = images.get_bubble_alignment(7, False)
    assert (plain.left_member, plain.right_member) == ("leader", "follower")
    flipped = images.get_bubble_alignment(7, True)
    assert (flipped.left_member, flipped.right_member) == ("follower", "leader")
    assert images.get_bubble_alignment(8, False).left_member == "follower"


def test_bubble_alignment_unknown_image_defaults_to_leader_left() -> None:
    assert images.get_bubble_alignment(99, False).left_member == "leader"
    assert images.get_bubble_alignment(99, True).left_member == "follower"


def test_get_dancer_scale() -> None:
    assert images.get_dancer_scale("both", 11) == 1.251
    assert images.get_dancer_scale("follow", 1) == 1.071
    assert images.get_dancer_scale("lead", 500) == 1.0


def test_solo_image_role() -> None:
    assert images.solo_image_role(DancerRow("a", "lead")) == "lead"
    assert images.solo_image_role(DancerRow("a", "unknown")) == "lead"
    assert images.solo_image_role(DancerRow("a", "follow")) == "follow"
    assert images.solo_image_role(DancerRow("a", "both")) == "follow"
