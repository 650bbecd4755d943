from time import perf_counter


class Timer:
    def __init__(self):
        self._time = 0.0

    def reset(self) -> None:
        self._time = perf_counter()

    def elapsed(self) -> float:
        return perf_counter() - self._time

    def is_elapsed(self, duration: float) -> bool:
        """
        Returns:
            True if the timer has waited duration
        """
        return self.elapsed() >= duration

    def remaining(self, duration: float) -> float:
        """Time left until duration has elapsed, never negative."""
        return max(0.0, duration - self.elapsed())
