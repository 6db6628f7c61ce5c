import math

from vr_activity.tracking.modules.jump import JumpDetector, JumpState


class TestJumpDetector:

    def test_takeoff_and_landing(self, config, make_metrics):
        detector = JumpDetector(config)
        state = JumpState()
        assert math.isinf(state.time_since_landing(1.0))

        state, events = detector.step(state, make_metrics(head_height=1.85), timestamp=1.0)
        assert state.is_airborne
        assert [e.variant for e in events] == ["takeoff"]

        state, events = detector.step(state, make_metrics(head_height=1.9), timestamp=1.1)
        assert state.is_airborne
        assert events == []

        state, events = detector.step(state, make_metrics(head_height=1.7), timestamp=1.2)
        assert not state.is_airborne
        assert state.last_landing_time == 1.2
        assert [e.variant for e in events] == ["landing"]
        assert all(not e.scored for e in events)
        assert abs(state.time_since_landing(1.5) - 0.3) < 1e-9

    def test_small_hop_is_not_a_jump(self, config, make_metrics):
        state, events = JumpDetector(config).step(JumpState(), make_metrics(head_height=1.75))
        assert not state.is_airborne
        assert events == []
