import pytest

from packetflow.state import Dashboard, Frame, IconTimers, VisualState
from packetflow.types import GREEN, Packet, PacketStatus


def make_packet(key="imx", status=PacketStatus.SendingToAPI):
    return Packet(key, 200.0, 200.0, 250.0, 200.0, GREEN, status)


class TestRun:
    def test_begin_resets(self):
        state = VisualState()
        state.packets["old"] = make_packet("old", PacketStatus.Done)
        state.dashboard = Dashboard(1.0, 2.0, 5.0)
        state.timers.api = 12

        assert state.try_begin_run()

        assert state.packets == {}
        assert state.dashboard == Dashboard()
        assert state.running
        # icon animations are left to finish
        assert state.timers.api == 12

    def test_begin_refused_while_running(self):
        state = VisualState()
        assert state.try_begin_run()
        state.add_packet(make_packet())

        assert not state.try_begin_run()
        assert list(state.packets) == ["imx"]

    def test_duplicate_key(self):
        state = VisualState()
        state.add_packet(make_packet())

        with pytest.raises(ValueError):
            state.add_packet(make_packet())


class TestTilt:
    def test_steps(self):
        state = VisualState()

        assert state.adjust_tilt(1) == 0.5
        assert state.adjust_tilt(1) == 1.0
        assert state.adjust_tilt(-1) == 0.5

    def test_clamps(self):
        state = VisualState()

        for _ in range(100):
            state.adjust_tilt(1)
        assert state.tilt == 15.0

        for _ in range(200):
            state.adjust_tilt(-1)
        assert state.tilt == -15.0


class TestSnapshot:
    def test_is_a_copy(self):
        state = VisualState()
        state.add_packet(make_packet())

        frame = state.snapshot()
        frame.packets[0].x = 999.0
        frame.dashboard.roll = 3.0
        frame.timers.api = 5

        assert state.packets["imx"].x == 200.0
        assert state.dashboard.roll == 0.0
        assert state.timers.api == 0

    def test_tilt_frame(self):
        def tilt_frame(tilt):
            return Frame([], IconTimers(), Dashboard(), tilt, False).tilt_frame()

        assert tilt_frame(0.0) == 0
        assert tilt_frame(2.0) == 0
        assert tilt_frame(-2.5) == 1
        assert tilt_frame(2.5) == 2
        assert tilt_frame(-10.5) == 3
        assert tilt_frame(15.0) == 4


def test_sharpness_ratio():
    assert Dashboard(sharpness=5.0).sharpness_ratio() == 0.5
    assert Dashboard(sharpness=0.0).sharpness_ratio() == 0.0
    assert Dashboard(sharpness=6.0).sharpness_ratio() == 1.0
