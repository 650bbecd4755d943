from asyncio import run

import pytest
from aiohttp import ClientSession
from aiohttp import test_utils

from packetflow.config import API_ICON_POSITION, IMX_ENDPOINT, PIPELINE_Y
from packetflow.mock_server import MockSensorApplication
from packetflow.state import VisualState
from packetflow.types import GREEN, PacketStatus, SharpnessReading
from packetflow.worker import SensorWorker

READING = SharpnessReading(5.0, 120.0, 0.0)


def make_worker(state: VisualState, url="http://127.0.0.1:1/imx477/sensor") -> SensorWorker:
    return SensorWorker(url, READING, "imx", state, 200.0, GREEN)


async def run_against(app, state: VisualState, before_run=None) -> SensorWorker:
    async with test_utils.TestServer(app) as server:
        worker = make_worker(state, str(server.make_url(IMX_ENDPOINT)))
        worker.register()

        if before_run is not None:
            before_run()

        async with ClientSession() as session:
            await worker.run(session)

    return worker


class TestRegister:
    def test_creates_packet(self):
        state = VisualState()
        make_worker(state).register()

        packet = state.packets["imx"]
        assert packet.status == PacketStatus.SendingToAPI
        assert packet.active
        assert (packet.x, packet.y) == (200.0, PIPELINE_Y)
        assert (packet.target_x, packet.target_y) == API_ICON_POSITION
        assert packet.color == GREEN
        assert packet.payload is None

    def test_run_requires_register(self):
        async def go():
            async with ClientSession() as session:
                await make_worker(VisualState()).run(session)

        with pytest.raises(AssertionError):
            run(go())


class TestOutcome:
    def test_success(self):
        state = VisualState()
        run(run_against(MockSensorApplication(failure_rate=0.0), state))

        packet = state.packets["imx"]
        assert packet.status == PacketStatus.ArrivedAtAPI
        assert packet.payload == READING

    def test_server_error(self):
        state = VisualState()
        run(run_against(MockSensorApplication(failure_rate=1.0), state))

        packet = state.packets["imx"]
        assert packet.status == PacketStatus.Error
        assert packet.active
        assert packet.payload is None

    def test_connection_refused(self):
        state = VisualState()
        worker = make_worker(state)
        worker.register()

        async def go():
            async with ClientSession() as session:
                await worker.run(session)

        run(go())

        assert state.packets["imx"].status == PacketStatus.Error

    def test_stale_result_dropped(self):
        state = VisualState()

        def forget():
            with state.lock:
                state.packets = {}

        run(run_against(MockSensorApplication(failure_rate=0.0), state, forget))

        assert state.packets == {}

    def test_reported_once(self):
        state = VisualState()
        worker = run(run_against(MockSensorApplication(failure_rate=0.0), state))

        # a second completion must not touch a packet that already moved on
        with state.lock:
            state.packets["imx"].status = PacketStatus.SendingToRabbit

        async def again():
            async with ClientSession() as session:
                await worker.run(session)

        run(again())

        assert state.packets["imx"].status == PacketStatus.SendingToRabbit
