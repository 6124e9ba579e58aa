import logging
import secrets
import time
from typing import Callable, List, Optional, Tuple

from jumpbet.models import Player, Round, RoundResult

from .betbook import BetBook
from .ledger import Ledger

IDLE = 'idle'
OPEN = 'open'
SETTLING = 'settling'
CLOSED = 'closed'


def fair_coin() -> bool:
    return secrets.randbits(1) == 1


def new_round_id() -> str:
    return secrets.token_hex(16)


class ResolutionEngine:
    """Round state machine: idle -> open -> settling -> open -> ... -> closed.

    A round's outcome is drawn when the round opens and every bet placed
    while it is open is settled against that same outcome at the next tick.
    """

    def __init__(
        self,
        ledger: Ledger,
        betbook: BetBook,
        outcome_source: Callable[[], bool] = fair_coin,
        id_source: Callable[[], str] = new_round_id,
        wall_clock: Callable[[], float] = time.time,
        history_limit: int = 10,
        logger: Optional[logging.Logger] = None,
    ):
        self.ledger = ledger
        self.betbook = betbook
        self.outcome_source = outcome_source
        self.id_source = id_source
        self.wall_clock = wall_clock
        self.history_limit = history_limit
        self.logger = logger or logging.getLogger(__name__)
        self.state = IDLE
        self.round: Optional[Round] = None
        # newest first, at most history_limit entries
        self.history: List[RoundResult] = []

    @property
    def is_open(self) -> bool:
        return self.state == OPEN

    def settle(self) -> List[Tuple[Player, RoundResult]]:
        """Apply the open round's outcome to every drained bet."""
        if self.state != OPEN or self.round is None:
            return []
        self.state = SETTLING
        current = self.round
        bets = self.betbook.drain()
        settled = []
        for bet in bets:
            if bet.player_id not in self.ledger:
                continue
            if current.outcome:
                new_balance = self.ledger.credit(bet.player_id, bet.amount * 2)
            else:
                new_balance = self.ledger.zero(bet.player_id)
            player = self.ledger.get(bet.player_id)
            result = RoundResult(
                round_id=current.round_id,
                timestamp=int(self.wall_clock() * 1000),
                player_nickname=player.nickname,
                bet_amount=bet.amount,
                win=current.outcome,
                new_balance=new_balance,
            )
            self.ledger.record(bet.player_id, result)
            self._append_history(result)
            settled.append((player, result))
            self.logger.info(
                f"[round-settle] round={current.round_id} player={player.id} nickname={player.nickname} "
                f"stake={bet.amount} win={current.outcome} balance={new_balance}"
            )
        return settled

    def open_round(self, started_at: float, closes_at: float) -> Round:
        round_id = self.id_source()
        self.round = Round(
            round_id=round_id,
            outcome=bool(self.outcome_source()),
            started_at=started_at,
            closes_at=closes_at,
        )
        self.state = OPEN
        self.logger.info(f"[round-open] round={round_id} outcome={'win' if self.round.outcome else 'lose'}")
        return self.round

    def close(self) -> None:
        """Stop accepting bets for good; used at shutdown."""
        self.state = CLOSED

    def _append_history(self, result: RoundResult) -> None:
        self.history.insert(0, result)
        del self.history[self.history_limit:]
