import pytest

from vr_activity.tracking.core.data_types import ActivityConfig, GestureKind
from vr_activity.tracking.modules.squat import SquatDetector, SquatPhase, SquatState

STANDING = 1.7
DEEP = 1.0      # 0.7 below standing, deeper than 0.3 * 1.7
SHALLOW = 1.4   # 0.3 below standing, not deep enough
DT = 0.1


@pytest.fixture
def detector(config):
    return SquatDetector(config)


def run(detector, state, heights, make_metrics, looking_down=0.0, dt=DT):
    events = []
    for h in heights:
        state, tick_events = detector.step(
            state, make_metrics(head_height=h, looking_down=looking_down), STANDING, dt
        )
        events.extend(tick_events)
    return state, events


class TestSquatDetector:

    def test_starts_awaiting_reset(self):
        state = SquatState()
        assert state.phase == SquatPhase.AWAITING_RESET
        assert state.cooldown_elapsed == 0.0
        assert state.count == 0

    def test_standing_arms_detector(self, detector, make_metrics):
        state, events = run(detector, SquatState(), [STANDING], make_metrics)
        assert state.phase == SquatPhase.ARMED_LOW
        assert [e.variant for e in events] == ["reset"]

    def test_single_squat_counts_once(self, detector, make_metrics):
        heights = [STANDING] + [1.5, 1.2] + [DEEP] * 20 + [1.3, 1.6, STANDING]
        state, events = run(detector, SquatState(), heights, make_metrics)
        assert state.count == 1
        detected = [e for e in events if e.variant == "detected"]
        assert len(detected) == 1
        assert detected[0].kind == GestureKind.SQUAT
        assert detected[0].scored

    def test_holding_without_reset_does_not_count_again(self, detector, make_metrics):
        # bob up and down below the reset band, well within the cooldown
        heights = [STANDING, DEEP, SHALLOW, DEEP, SHALLOW, DEEP]
        state, _ = run(detector, SquatState(), heights, make_metrics)
        assert state.count == 1
        assert state.phase == SquatPhase.AWAITING_RESET

    def test_reset_bypasses_cooldown(self, detector, make_metrics):
        heights = [STANDING, DEEP, STANDING, DEEP]
        state, _ = run(detector, SquatState(), heights, make_metrics)
        assert state.count == 2

    def test_no_reset_counts_again_only_after_cooldown(self, make_metrics):
        detector = SquatDetector(ActivityConfig(squat_cooldown_seconds=1.0))
        state, _ = run(detector, SquatState(), [STANDING, DEEP], make_metrics, dt=0.25)
        assert state.count == 1

        # held low for the whole cooldown
        state, _ = run(detector, state, [DEEP] * 4, make_metrics, dt=0.25)
        assert state.count == 1
        assert state.cooldown_elapsed == pytest.approx(1.0)

        state, _ = run(detector, state, [DEEP], make_metrics, dt=0.25)
        assert state.count == 2

    def test_first_squat_without_standing_waits_for_cooldown(self, make_metrics):
        detector = SquatDetector(ActivityConfig(squat_cooldown_seconds=0.5))
        state, _ = run(detector, SquatState(), [DEEP] * 2, make_metrics, dt=0.25)
        assert state.count == 0
        assert state.cooldown_elapsed == pytest.approx(0.5)
        state, _ = run(detector, state, [DEEP], make_metrics, dt=0.25)
        assert state.count == 1

    def test_looking_down_is_not_a_squat(self, detector, make_metrics):
        state, _ = run(detector, SquatState(), [STANDING, DEEP, DEEP], make_metrics, looking_down=0.8)
        assert state.count == 0
        assert state.phase == SquatPhase.ARMED_LOW

    def test_shallow_dip_is_not_a_squat(self, detector, make_metrics):
        state, _ = run(detector, SquatState(), [STANDING, SHALLOW], make_metrics)
        assert state.count == 0

    def test_zero_head_height_is_tracking_loss(self, detector, make_metrics):
        state, _ = run(detector, SquatState(), [STANDING, 0.0, 0.0], make_metrics)
        assert state.count == 0

    def test_depth_scales_with_standing_height(self, detector, make_metrics):
        # a 1.2 m player: 0.5 below standing is deep enough
        metrics = make_metrics(head_height=0.7, standing_height=1.2)
        state = SquatState(phase=SquatPhase.ARMED_LOW)
        state, events = detector.step(state, metrics, 1.2, DT)
        assert state.count == 1
        assert detector.is_deep_enough(metrics, 1.2)
