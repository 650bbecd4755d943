from sys import exit, stderr
from typing import Final

from loguru import logger

from .config import FPS
from .driver import PacketDriver
from .network import NetworkThread
from .render import Renderer
from .simulation import Simulation
from .state import VisualState
from .utils.timer import Timer
from .window import Window

FRAME_S: Final = 1.0 / FPS


def main():
    logger.remove()
    logger.add(
        stderr,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    try:
        run()

    except KeyboardInterrupt:
        logger.info("✋ Interrupt handled")

    except Exception as e:
        logger.exception(f"Application error: {e}")
        exit(1)


def run():
    state = VisualState()

    window = Window()
    network = NetworkThread()
    simulation = Simulation(state, network)

    try:
        network.start()
        frame_loop(simulation, PacketDriver(state), window, Renderer())

    finally:
        simulation.cancel()
        network.stop()
        window.close()


def frame_loop(simulation: Simulation, driver: PacketDriver, window: Window, renderer: Renderer) -> None:
    """
    Fixed-rate loop: input, one FSM step, draw. Waiting for the next frame
    happens inside the key poll so the window stays responsive.
    """

    timer = Timer()
    timer.reset()
    button_down = False

    while True:
        window.show(renderer.draw(simulation.state.snapshot(), button_down))

        delay_ms = int(timer.remaining(FRAME_S) * 1000)
        controls = window.poll(delay_ms)
        timer.reset()

        if controls.quit:
            logger.info("👋 Window closed")
            return

        if controls.fullscreen:
            window.toggle_fullscreen()

        simulation.handle(controls)
        driver.update()

        button_down = controls.button_down


if __name__ == "__main__":
    main()
