import logging
import threading
import time
from decimal import Decimal
from typing import Callable, List, Optional

from jumpbet.broadcast import Broadcaster, NullBroadcaster

from .betbook import BetBook
from .ledger import Ledger
from .registry import SessionRegistry
from .scheduler import RoundClock
from .settlement import CLOSED, SETTLING, ResolutionEngine, fair_coin, new_round_id


class GameSession:
    """The one authoritative game instance.

    Lifecycle is ``GameSession(...)`` -> ``start()`` -> ``shutdown()``.
    Every operation, including the clock tick, runs under a single lock, so
    a bet either lands before a tick drains the book or after the next
    round has opened. Pushes go out through the broadcaster inside the
    lock; broadcasters must not block.
    """

    def __init__(
        self,
        broadcaster: Optional[Broadcaster] = None,
        round_interval_ms: int = 7000,
        starting_balance: Decimal = Decimal('10'),
        history_limit: int = 10,
        leaderboard_size: int = 10,
        outcome_source: Callable[[], bool] = fair_coin,
        id_source: Callable[[], str] = new_round_id,
        time_source: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        spawn: Optional[Callable] = None,
        sleep: Callable[[float], None] = time.sleep,
        heartbeat_sec: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.time_source = time_source
        self._lock = threading.RLock()
        self.ledger = Ledger(starting_balance)
        self.betbook = BetBook()
        self.engine = ResolutionEngine(
            self.ledger,
            self.betbook,
            outcome_source=outcome_source,
            id_source=id_source,
            wall_clock=wall_clock,
            history_limit=history_limit,
            logger=self.logger,
        )
        self.clock = RoundClock(
            round_interval_ms,
            self.tick,
            time_source=time_source,
            spawn=spawn,
            sleep=sleep,
            heartbeat_sec=heartbeat_sec,
            logger=self.logger,
        )
        self.registry = SessionRegistry(
            self.ledger,
            self.betbook,
            self.engine,
            self.clock,
            broadcaster or NullBroadcaster(),
            leaderboard_size=leaderboard_size,
            logger=self.logger,
        )

    @classmethod
    def from_config(cls, config, broadcaster=None, spawn=None, sleep=time.sleep, logger=None):
        return cls(
            broadcaster=broadcaster,
            round_interval_ms=int(config.get('ROUND_INTERVAL_MS', 7000)),
            starting_balance=Decimal(str(config.get('STARTING_BALANCE', '10'))),
            history_limit=int(config.get('HISTORY_LIMIT', 10)),
            leaderboard_size=int(config.get('LEADERBOARD_SIZE', 10)),
            spawn=spawn,
            sleep=sleep,
            heartbeat_sec=int(config.get('TIMER_HEARTBEAT_SEC', 0)),
            logger=logger,
        )

    # ---- lifecycle ----

    def start(self, run_clock: bool = True) -> None:
        """Open the first round and, unless told otherwise, start the clock."""
        with self._lock:
            if self.engine.round is None:
                closes_at = self.clock.arm()
                self.engine.open_round(self.time_source(), closes_at)
                self.registry.broadcast_game_state()
            if run_clock:
                self.clock.start()

    def shutdown(self) -> None:
        with self._lock:
            self.clock.stop()
            self.engine.close()

    def tick(self) -> None:
        """Settle the open round and open the next one.

        Called by the clock; never raises.
        """
        with self._lock:
            try:
                self._advance_round()
            except Exception:
                self.logger.exception('[tick-failed] round transition raised')
                self._reopen_after_failure()

    def _advance_round(self) -> None:
        if self.engine.state == CLOSED:
            return
        settled = self.engine.settle()
        for player, result in settled:
            self.registry.send_round_result(player, result)
        if settled:
            self.registry.broadcast_leaderboard()
        closes_at = self.clock.advance()
        self.engine.open_round(self.time_source(), closes_at)
        self.registry.broadcast_game_state()

    def _reopen_after_failure(self) -> None:
        # Without an open round every bet is refused until the next tick
        if self.engine.state != SETTLING:
            return
        try:
            self.engine.open_round(self.time_source(), self.clock.closes_at)
        except Exception:
            self.logger.exception('[tick-failed] could not reopen betting; bets refused until the next tick')
            return
        self.registry.broadcast_game_state()

    # ---- player requests ----

    def join(self, handle: str, nickname: str) -> dict:
        with self._lock:
            return self.registry.join(handle, nickname)

    def leave(self, handle: str) -> None:
        with self._lock:
            self.registry.leave(handle)

    def snapshot(self, handle: str) -> dict:
        with self._lock:
            return self.registry.snapshot(handle)

    def place_bet(self, handle: str) -> dict:
        with self._lock:
            return self.registry.place_bet(handle)

    # ---- read-only views ----

    def public_state(self) -> dict:
        with self._lock:
            state = self.registry.round_dict()
            state['playerCount'] = len(self.ledger)
            state['gameHistory'] = self.registry.history_dicts()
            return state

    def leaderboard(self) -> List[dict]:
        with self._lock:
            return self.registry.leaderboard()
