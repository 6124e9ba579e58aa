from typing import Iterable, List

from jumpbet.models import LeaderboardEntry, Player


def rank_players(players: Iterable[Player], limit: int = 10) -> List[LeaderboardEntry]:
    """Top ``limit`` players by win rate, best first.

    ``sorted`` is stable, so players with equal win rates keep roster order.
    """
    entries = [LeaderboardEntry.for_player(p) for p in players]
    entries = sorted(entries, key=lambda e: e.win_rate, reverse=True)
    return entries[:limit]
