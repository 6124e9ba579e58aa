"""Game domain services: ledger, bets, round clock and settlement.

This package contains the pure(ish) round/session state machine. Socket
handlers and HTTP views call into it through ``GameSession`` and never
touch the individual components directly.
"""

from .session import GameSession

__all__ = ['GameSession']
