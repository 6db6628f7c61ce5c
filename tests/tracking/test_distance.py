import pytest

from vr_activity.tracking.core.data_types import ActivityConfig, Point3D, TrackedPointId
from vr_activity.tracking.modules.distance import DistanceAccumulator, PointTrackingState, TeleportGuard

HEAD = TrackedPointId.HEAD


@pytest.fixture
def accumulator(config):
    return DistanceAccumulator(config)


class TestDistanceAccumulator:

    def test_seed_starts_at_zero(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        assert state.previous_position == Point3D(0, 1, 0)
        assert state.cumulative_distance == 0.0

    def test_seed_keeps_accumulated_distance(self, accumulator):
        state = PointTrackingState(Point3D(0, 0, 0), cumulative_distance=42.0)
        state = accumulator.seed(Point3D(1, 1, 1), state)
        assert state.cumulative_distance == 42.0
        assert state.previous_position == Point3D(1, 1, 1)

    def test_movement_is_scaled(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        state, added, teleport = accumulator.update(state, HEAD, Point3D(0, 1.5, 0))
        assert teleport is None
        assert added == pytest.approx(50.0)
        assert state.cumulative_distance == pytest.approx(50.0)
        assert state.previous_position == Point3D(0, 1.5, 0)

    def test_jitter_below_noise_floor_is_ignored(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        new_state, added, teleport = accumulator.update(state, HEAD, Point3D(0.05, 1, 0))
        assert added == 0.0
        assert teleport is None
        assert new_state.previous_position == Point3D(0, 1, 0)

    def test_slow_drift_accrues_once_past_noise_floor(self, accumulator):
        state = accumulator.seed(Point3D(0, 0, 0))
        total = 0.0
        for x in (0.04, 0.08, 0.12):
            state, added, _ = accumulator.update(state, HEAD, Point3D(x, 0, 0))
            total += added
        assert total == pytest.approx(12.0)
        assert state.previous_position == Point3D(0.12, 0, 0)

    def test_teleport_adds_nothing_and_moves_reference(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        state, added, teleport = accumulator.update(state, HEAD, Point3D(5, 1, 0), timestamp=2.0)
        assert added == 0.0
        assert teleport is not None
        assert teleport.point == HEAD
        assert teleport.displacement == pytest.approx(5.0)
        assert teleport.timestamp == 2.0
        assert state.cumulative_distance == 0.0
        assert state.previous_position == Point3D(5, 1, 0)

        # next tick is measured from where the point reappeared
        state, added, teleport = accumulator.update(state, HEAD, Point3D(5.5, 1, 0))
        assert teleport is None
        assert added == pytest.approx(50.0)

    def test_displacement_equal_to_teleport_threshold_counts(self, accumulator):
        state = accumulator.seed(Point3D(0, 0, 0))
        _, added, teleport = accumulator.update(state, HEAD, Point3D(1.0, 0, 0))
        assert teleport is None
        assert added == pytest.approx(100.0)

    def test_custom_scale(self):
        accumulator = DistanceAccumulator(ActivityConfig(movement_to_distance_scale=1.0))
        state = accumulator.seed(Point3D(0, 0, 0))
        _, added, _ = accumulator.update(state, HEAD, Point3D(0, 0.5, 0))
        assert added == pytest.approx(0.5)


class TestTeleportGuard:

    def test_plausible_displacement(self):
        assert TeleportGuard(1.0).check(HEAD, 0.99) is None

    def test_implausible_displacement(self, caplog):
        with caplog.at_level("WARNING"):
            event = TeleportGuard(1.0).check(TrackedPointId.LEFT_HAND, 3.0, 1.5)
        assert event.point == TrackedPointId.LEFT_HAND
        assert event.to_dict() == {"point": "left_hand", "displacement": 3.0, "timestamp": 1.5}
        assert "Teleport: left_hand" in caplog.text


class TestNonFinitePositions:

    def test_nan_position_is_ignored(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        new_state, added, teleport = accumulator.update(state, HEAD, Point3D(0, float("nan"), 0))
        assert new_state is state
        assert added == 0.0
        assert teleport is None

        new_state, added, _ = accumulator.update(new_state, HEAD, Point3D(0, 1.5, 0))
        assert added == pytest.approx(50.0)

    def test_nan_seed_does_not_replace_reference(self, accumulator):
        state = accumulator.seed(Point3D(0, 1, 0))
        state = accumulator.seed(Point3D(float("nan"), 1, 0), state)
        assert state.previous_position == Point3D(0, 1, 0)

    def test_nan_first_seed_recovers_on_next_position(self, accumulator):
        state = accumulator.seed(Point3D(float("inf"), 1, 0))
        state, added, teleport = accumulator.update(state, HEAD, Point3D(0, 1, 0))
        assert added == 0.0
        assert teleport is None
        assert state.previous_position == Point3D(0, 1, 0)

        state, added, _ = accumulator.update(state, HEAD, Point3D(0, 1.5, 0))
        assert state.cumulative_distance == pytest.approx(50.0)
