import pytest

from vr_activity.tracking.modules.side_lean import LeanSide, SideLeanDetector, SideLeanState


@pytest.fixture
def detector(config):
    return SideLeanDetector(config)


def lean_left(make_metrics, roll=45.0):
    # head tilted left, right hand raised
    return make_metrics(head_roll=roll, left_y=0.9, right_y=1.8)


def lean_right(make_metrics, roll=320.0):
    return make_metrics(head_roll=roll, left_y=1.8, right_y=0.9)


def neutral(make_metrics, roll=0.0):
    return make_metrics(head_roll=roll, left_y=1.0, right_y=1.0)


class TestSideLeanDetector:

    def test_starts_disarmed(self, detector, make_metrics):
        state, events = detector.step(SideLeanState(), lean_left(make_metrics))
        assert state.total == 0
        assert events == []

    def test_neutral_arms(self, detector, make_metrics):
        state, events = detector.step(SideLeanState(), neutral(make_metrics, roll=355.0))
        assert state.armed
        assert [e.variant for e in events] == ["reset"]

    def test_left_lean_counts_once_and_disarms(self, detector, make_metrics):
        state, _ = detector.step(SideLeanState(), neutral(make_metrics))
        for roll in (15.0, 30.0, 45.0, 60.0, 45.0):
            state, _ = detector.step(state, lean_left(make_metrics, roll))
        assert state.count_left == 1
        assert state.count_right == 0
        assert not state.armed
        assert state.last_side == LeanSide.LEFT

    def test_right_lean(self, detector, make_metrics):
        state, _ = detector.step(SideLeanState(), neutral(make_metrics))
        state, events = detector.step(state, lean_right(make_metrics))
        assert state.count_right == 1
        assert state.last_side == LeanSide.RIGHT
        assert [(e.variant, e.count, e.scored) for e in events] == [("right", 1, True)]

    def test_must_rearm_before_next_lean(self, detector, make_metrics):
        state, _ = detector.step(SideLeanState(), neutral(make_metrics))
        state, _ = detector.step(state, lean_left(make_metrics))

        # back to neutral roll but hands still apart: stays disarmed
        state, _ = detector.step(state, make_metrics(head_roll=0.0, left_y=0.9, right_y=1.8))
        assert not state.armed
        state, _ = detector.step(state, lean_left(make_metrics))
        assert state.count_left == 1

        state, _ = detector.step(state, neutral(make_metrics))
        state, _ = detector.step(state, lean_left(make_metrics))
        assert state.count_left == 2

    def test_wrong_hand_raised_does_not_count(self, detector, make_metrics):
        state, _ = detector.step(SideLeanState(), neutral(make_metrics))
        state, _ = detector.step(state, make_metrics(head_roll=45.0, left_y=1.8, right_y=0.9))
        assert state.total == 0
        assert state.armed

    def test_roll_outside_bands(self, detector, make_metrics):
        state, _ = detector.step(SideLeanState(), neutral(make_metrics))
        state, _ = detector.step(state, lean_left(make_metrics, roll=120.0))
        state, _ = detector.step(state, lean_right(make_metrics, roll=350.0))
        assert state.total == 0

    @pytest.mark.parametrize("roll, expected", [(0, True), (9.9, True), (10, False), (350.5, True), (180, False)])
    def test_is_neutral_roll(self, detector, roll, expected):
        assert detector.is_neutral_roll(roll) is expected
