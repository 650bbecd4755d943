from typing import Final

# == Window == #

WINDOW_NAME: Final = "Geova Packet Flow"
WINDOW_SIZE: Final = (800, 600)
FPS: Final = 60
BACKGROUND_COLOR: Final = (0x1A, 0x1A, 0x1A)


# == Layout == #

PIPELINE_Y: Final = 200.0

TRIPOD_POSITION: Final = (80.0, 200.0)
API_ICON_POSITION: Final = (250.0, PIPELINE_Y)
RABBIT_ICON_POSITION: Final = (350.0, PIPELINE_Y)
WEBSOCKET_ICON_POSITION: Final = (450.0, PIPELINE_Y)
MONITOR_POSITION: Final = (600.0, PIPELINE_Y)

TILT_METER_POSITION: Final = (100.0, 300.0)
DASHBOARD_POSITION: Final = (50.0, 400.0)

# x, y, width, height
BUTTON_RECT: Final = (50, 40, 140, 44)


# == Motion == #

PACKET_SPEED: Final = 2.0  # px per frame
ICON_ACTIVE_FRAMES: Final = 60  # one second at 60 FPS


# == Tilt == #

TILT_LIMIT: Final = 15.0
TILT_STEP: Final = 0.5
TILT_SLIGHT: Final = 2.0
TILT_EXTREME: Final = 10.0


# == Sensors == #

SHARPNESS_RANGE: Final = (4.0, 6.0)
DISTANCE_RANGE_M: Final = (0.2, 8.0)


# == Network == #

SERVER_URL: Final = "http://localhost:8000"
IMX_ENDPOINT: Final = "/imx477/sensor"
MPU_ENDPOINT: Final = "/mpu/sensor"
TFLUNA_ENDPOINT: Final = "/tfluna/sensor"

# No timeout: a stalled call keeps its packet in SendingToAPI and the run open.
REQUEST_TIMEOUT_S: Final = None


# == Mock server == #

MOCK_SERVER_ENABLED: Final = True
MOCK_SERVER_PORT: Final = 8000
MOCK_FAILURE_RATE: Final = 0.1
