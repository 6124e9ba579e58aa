from decimal import Decimal
from typing import Dict, Iterator, Optional

from jumpbet.errors import InsufficientFunds, InvalidAmount, PlayerNotFound
from jumpbet.models import Player, RoundResult


class Ledger:
    """Balances and win/loss stats for every registered player.

    Iteration order is registration order, which the leaderboard relies
    on to break ties.
    """

    def __init__(self, starting_balance: Decimal = Decimal('10')):
        self.starting_balance = Decimal(starting_balance)
        self._players: Dict[str, Player] = {}

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def __len__(self) -> int:
        return len(self._players)

    def get(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise PlayerNotFound()
        return player

    def open_account(self, player_id: str, nickname: str) -> Player:
        player = Player(id=player_id, nickname=nickname, balance=self.starting_balance)
        self._players[player_id] = player
        return player

    def close_account(self, player_id: str) -> Optional[Player]:
        return self._players.pop(player_id, None)

    def credit(self, player_id: str, amount) -> Decimal:
        """Replace the player's balance with ``amount``."""
        amount = Decimal(amount)
        if amount < 0:
            raise InvalidAmount()
        player = self.get(player_id)
        player.balance = amount
        return player.balance

    def zero(self, player_id: str) -> Decimal:
        return self.credit(player_id, Decimal('0'))

    def deduct_to_zero(self, player_id: str) -> Decimal:
        """Take the whole balance as a stake and return it."""
        player = self.get(player_id)
        if player.balance <= 0:
            raise InsufficientFunds()
        stake = player.balance
        player.balance = Decimal('0')
        return stake

    def record(self, player_id: str, result: RoundResult) -> Player:
        player = self.get(player_id)
        if result.win:
            player.stats.wins += 1
        else:
            player.stats.losses += 1
        player.history.insert(0, result)
        return player
