"""
Tests for transform animations and the transform store.
"""

import math

import pytest

from touchswitch.animation import Animation, TransformStore, circle_smoothing
from touchswitch.models import IDENTITY, Pose
from touchswitch.notifications import NotificationKind, NotificationQueue


def linear_smoothing(progress: float) -> float:
    return progress


class TestSmoothing:
    """Tests for easing curves."""

    def test_circle_smoothing_endpoints(self):
        assert circle_smoothing(0.0) == 0.0
        assert circle_smoothing(1.0) == 1.0

    def test_circle_smoothing_eases_out(self):
        """Half the time covers more than half the distance."""
        assert circle_smoothing(0.5) == pytest.approx(math.sqrt(0.75))
        assert circle_smoothing(0.5) > 0.5


class TestAnimation:
    """Tests for single pose animations."""

    def test_zero_duration_is_complete(self):
        target = Pose(0.5, 0.5, 10, 20)
        animation = Animation(IDENTITY, target, 0)

        assert animation.progress == 1.0
        assert not animation.running()
        assert animation.current() == target

    def test_custom_smoothing_midpoint(self):
        """A caller-supplied curve replaces the default easing."""
        animation = Animation(IDENTITY, Pose(0.5, 0.5, 100, -50), 200, linear_smoothing)
        animation.advance(100)

        pose = animation.current()
        assert pose.scale_x == pytest.approx(0.75)
        assert pose.translation_x == pytest.approx(50)
        assert pose.translation_y == pytest.approx(-25)
        assert animation.running()

    def test_advance_clamps_at_duration(self):
        animation = Animation(IDENTITY, Pose(1, 1, 10, 0), 100)
        animation.advance(500)

        assert animation.elapsed_ms == 100
        assert not animation.running()
        assert animation.current().translation_x == pytest.approx(10)


class TestTransformStore:
    """Tests for TransformStore bookkeeping and notifications."""

    def setup_method(self):
        self.notifications = NotificationQueue()
        self.store = TransformStore(self.notifications, duration_ms=100)

    def test_attach_is_idempotent(self):
        """Second attach changes nothing and emits nothing."""
        assert self.store.attach(1, 1, IDENTITY)
        assert not self.store.attach(1, 1, Pose(0.5, 0.5, 0, 0))

        assert self.store.get(1).pose == IDENTITY
        kinds = [n.kind for n in self.notifications.drain()]
        assert kinds == [NotificationKind.TRANSFORMER_ADDED]

    def test_set_target_unknown_window(self):
        assert not self.store.set_target(42, IDENTITY, directly=True)

    def test_set_target_directly_cancels_animation(self):
        target = Pose(0.5, 0.5, 100, 0)
        self.store.attach(1, 1)
        self.store.set_target(1, target, directly=False)
        assert self.store.any_running()

        self.store.set_target(1, Pose(0.5, 0.5, 200, 0), directly=True)

        assert not self.store.any_running()
        assert self.store.get(1).pose.translation_x == 200

    def test_animated_target_reached_after_duration(self):
        target = Pose(0.5, 0.5, 100, 40)
        self.store.attach(1, 1)
        self.store.set_target(1, target, directly=False)

        assert self.store.tick(50)
        assert 0 < self.store.get(1).pose.translation_x < 100

        assert not self.store.tick(50)
        assert self.store.get(1).pose == target
        assert self.store.get(1).animation is None

    def test_same_target_does_not_animate(self):
        self.store.attach(1, 1)
        self.store.set_target(1, IDENTITY, directly=False)
        assert not self.store.any_running()

    def test_remove_is_idempotent(self):
        self.store.attach(1, 1)
        self.notifications.drain()

        assert self.store.remove(1)
        assert not self.store.remove(1)

        kinds = [n.kind for n in self.notifications.drain()]
        assert kinds == [NotificationKind.TRANSFORMER_REMOVED]

    def test_remove_tree_removes_children(self):
        self.store.attach(1, 1)
        self.store.attach(10, 1)
        self.store.attach(2, 2)

        removed = self.store.remove_tree(1)

        assert sorted(removed) == [1, 10]
        assert list(self.store) == [2]

    def test_clear_emits_removal_per_window(self):
        self.store.attach(1, 1)
        self.store.attach(2, 2)
        self.notifications.drain()

        self.store.clear()

        assert len(self.store) == 0
        removed = [n.window_id for n in self.notifications.drain()
                   if n.kind == NotificationKind.TRANSFORMER_REMOVED]
        assert sorted(removed) == [1, 2]
