import logging
from typing import List, Optional

from jumpbet.broadcast import Broadcaster
from jumpbet.errors import DuplicatePlayer, RoundClosed
from jumpbet.models import Player, RoundResult, format_amount

from .betbook import BetBook
from .leaderboard import rank_players
from .ledger import Ledger
from .scheduler import RoundClock
from .settlement import ResolutionEngine


class SessionRegistry:
    """Connected players and the views pushed to them.

    Not thread-safe on its own; ``GameSession`` serializes every call.
    """

    def __init__(
        self,
        ledger: Ledger,
        betbook: BetBook,
        engine: ResolutionEngine,
        clock: RoundClock,
        broadcaster: Broadcaster,
        leaderboard_size: int = 10,
        logger: Optional[logging.Logger] = None,
    ):
        self.ledger = ledger
        self.betbook = betbook
        self.engine = engine
        self.clock = clock
        self.broadcaster = broadcaster
        self.leaderboard_size = leaderboard_size
        self.logger = logger or logging.getLogger(__name__)

    @property
    def handles(self) -> List[str]:
        return [p.id for p in self.ledger]

    def join(self, handle: str, nickname: str) -> dict:
        if handle in self.ledger:
            raise DuplicatePlayer()
        player = self.ledger.open_account(handle, nickname)
        self.logger.info(f"[player-join] player={handle} nickname={nickname} balance={player.balance}")
        self.broadcast_leaderboard()
        # the newcomer gets the full snapshot below instead
        self.broadcast_game_state(exclude=handle)
        state = self.snapshot(handle)
        state['gameHistory'] = self.history_dicts()
        return state

    def leave(self, handle: str) -> None:
        player = self.ledger.close_account(handle)
        if player is None:
            return
        forfeited = self.betbook.discard(handle)
        self.logger.info(
            f"[player-leave] player={handle} nickname={player.nickname} "
            f"forfeited={forfeited.amount if forfeited else 0}"
        )
        self.broadcast_game_state()
        self.broadcast_leaderboard()

    def snapshot(self, handle: str) -> dict:
        player = self.ledger.get(handle)
        state = player.to_dict()
        state.update(self.round_dict())
        return state

    def place_bet(self, handle: str) -> dict:
        player = self.ledger.get(handle)
        if not self.engine.is_open:
            raise RoundClosed()
        stake = self.betbook.commit(self.ledger, handle).amount
        self.logger.info(
            f"[bet] round={self.engine.round.round_id} player={handle} nickname={player.nickname} amount={stake}"
        )
        self.broadcast_game_state()
        result = self.round_dict()
        result['newBalance'] = format_amount(player.balance)
        return result

    def round_dict(self) -> dict:
        current = self.engine.round
        return {
            'roundId': current.round_id if current else None,
            'timeToNextRoundMs': self.clock.time_remaining_ms(),
            'openBetCount': len(self.betbook),
        }

    def history_dicts(self) -> List[dict]:
        return [r.to_dict() for r in self.engine.history]

    def leaderboard(self) -> List[dict]:
        return [e.to_dict() for e in rank_players(self.ledger, self.leaderboard_size)]

    def game_state_for(self, player: Player, history: Optional[List[dict]] = None) -> dict:
        state = self.round_dict()
        state.update({
            'balance': format_amount(player.balance),
            'stats': player.stats.to_dict(),
            'gameHistory': history if history is not None else self.history_dicts(),
        })
        return state

    def broadcast_game_state(self, exclude: Optional[str] = None) -> None:
        history = self.history_dicts()
        for player in self.ledger:
            if player.id == exclude:
                continue
            self.broadcaster.push(player.id, 'gameState', self.game_state_for(player, history))

    def broadcast_leaderboard(self) -> None:
        self.broadcaster.push_all(self.handles, 'leaderboard', self.leaderboard())

    def send_round_result(self, player: Player, result: RoundResult) -> None:
        self.broadcaster.push(player.id, 'roundResult', {
            'roundId': result.round_id,
            'win': result.win,
            'newBalance': format_amount(result.new_balance),
            'stats': player.stats.to_dict(),
            'gameHistory': self.history_dicts(),
        })
