import logging
import time
from typing import Callable, Optional


class RoundClock:
    """Fixed-period round timer.

    - Owns only the current round deadline (``closes_at``, monotonic seconds)
    - A single background worker sleeps until the deadline and fires ``on_tick``
    - ``on_tick`` is expected to call ``advance()`` to move the deadline on
    - ``stop()`` is the only way to halt it; there is no pause/resume
    """

    def __init__(
        self,
        period_ms: int,
        on_tick: Callable[[], None],
        time_source: Callable[[], float] = time.monotonic,
        spawn: Optional[Callable] = None,
        sleep: Callable[[float], None] = time.sleep,
        heartbeat_sec: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        self.period = period_ms / 1000.0
        self.on_tick = on_tick
        self.time_source = time_source
        self.spawn = spawn
        self.sleep = sleep
        self.heartbeat_sec = heartbeat_sec
        self.logger = logger or logging.getLogger(__name__)
        self.closes_at: Optional[float] = None
        self._running = False
        # Bumped on every start/stop so a stale worker exits instead of ticking
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def arm(self) -> float:
        """Set the first deadline one period from now."""
        self.closes_at = self.time_source() + self.period
        self.logger.info(f"[timer-set] period={self.period}s deadline={self.closes_at:.3f}")
        return self.closes_at

    def advance(self) -> float:
        """Move the deadline one period on, without drifting the cadence."""
        now = self.time_source()
        if self.closes_at is None:
            return self.arm()
        self.closes_at += self.period
        if self.closes_at <= now:
            # Fell more than a whole period behind; start a fresh cadence.
            self.closes_at = now + self.period
        return self.closes_at

    def time_remaining_ms(self) -> int:
        if self.closes_at is None:
            return 0
        return max(0, int((self.closes_at - self.time_source()) * 1000))

    def start(self) -> None:
        if self._running:
            return
        if self.spawn is None:
            raise RuntimeError('RoundClock needs a spawn function to run in the background')
        if self.closes_at is None:
            self.arm()
        self._running = True
        self._generation += 1
        self.spawn(self._worker, self._generation)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._generation += 1
        self.logger.info('[timer-stop] round clock stopped')

    def _alive(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _worker(self, generation: int) -> None:
        while self._alive(generation):
            remaining = self.closes_at - self.time_source()
            if remaining > 0:
                # Sleep in short steps so stop() is honoured promptly
                step = min(remaining, self.heartbeat_sec or 0.25)
                self.sleep(step)
                if self.heartbeat_sec and self._alive(generation):
                    self.logger.info(f"[timer-heartbeat] remaining={max(0.0, self.closes_at - self.time_source()):.1f}s")
                continue
            self.logger.info(f"[timer-fire] deadline={self.closes_at:.3f} late_by={-remaining:.3f}s")
            deadline = self.closes_at
            self.on_tick()
            if self.closes_at == deadline:
                self.advance()
