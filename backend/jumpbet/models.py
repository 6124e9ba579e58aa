from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


def format_amount(value: Decimal) -> str:
    """Render a balance the way clients expect it: '10', '20', '0'."""
    if not value:
        return '0'
    # normalize() would turn 20 into '2E+1'
    return format(value.normalize(), 'f')


@dataclass
class Stats:
    wins: int = 0
    losses: int = 0

    @property
    def played(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        if not self.played:
            return 0.0
        return self.wins / self.played

    def to_dict(self):
        return {'wins': self.wins, 'losses': self.losses}


@dataclass(frozen=True)
class RoundResult:
    """One settled bet, as kept in both the global and per-player history."""

    round_id: str
    timestamp: int
    player_nickname: str
    bet_amount: Decimal
    win: bool
    new_balance: Decimal

    def to_dict(self):
        return {
            'roundId': self.round_id,
            'timestamp': self.timestamp,
            'playerNickname': self.player_nickname,
            'betAmount': format_amount(self.bet_amount),
            'win': self.win,
            'newBalance': format_amount(self.new_balance),
        }


@dataclass
class Player:
    id: str
    nickname: str
    balance: Decimal
    stats: Stats = field(default_factory=Stats)
    # newest first, unbounded
    history: List[RoundResult] = field(default_factory=list)

    def to_dict(self):
        return {
            'nickname': self.nickname,
            'balance': format_amount(self.balance),
            'stats': self.stats.to_dict(),
            'personalHistory': [r.to_dict() for r in self.history],
        }


@dataclass(frozen=True)
class Bet:
    player_id: str
    amount: Decimal


@dataclass
class Round:
    """A betting window. The outcome is fixed when the round opens."""

    round_id: str
    outcome: bool
    started_at: float
    closes_at: float


@dataclass(frozen=True)
class LeaderboardEntry:
    nickname: str
    wins: int
    losses: int
    win_rate: float

    @classmethod
    def for_player(cls, player: Player) -> 'LeaderboardEntry':
        return cls(
            nickname=player.nickname,
            wins=player.stats.wins,
            losses=player.stats.losses,
            win_rate=player.stats.win_rate,
        )

    def to_dict(self):
        return {
            'nickname': self.nickname,
            'wins': self.wins,
            'losses': self.losses,
            'winRate': self.win_rate,
        }
