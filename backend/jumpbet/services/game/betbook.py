from decimal import Decimal
from typing import Dict, List, Optional

from jumpbet.errors import DuplicateBet
from jumpbet.models import Bet


class BetBook:
    """Open bets for the current round, keyed by player."""

    def __init__(self):
        self._bets: Dict[str, Bet] = {}

    def __len__(self) -> int:
        return len(self._bets)

    def __contains__(self, player_id) -> bool:
        return player_id in self._bets

    def place(self, player_id: str, amount: Decimal) -> Bet:
        if player_id in self._bets:
            raise DuplicateBet()
        bet = Bet(player_id=player_id, amount=amount)
        self._bets[player_id] = bet
        return bet

    def commit(self, ledger, player_id: str) -> Bet:
        """Take the player's whole balance from ``ledger`` as this round's bet."""
        if player_id in self._bets:
            raise DuplicateBet()
        return self.place(player_id, ledger.deduct_to_zero(player_id))

    def drain(self) -> List[Bet]:
        """Return every open bet and empty the book."""
        bets, self._bets = list(self._bets.values()), {}
        return bets

    def discard(self, player_id: str) -> Optional[Bet]:
        # The stake is forfeited, not refunded.
        return self._bets.pop(player_id, None)
