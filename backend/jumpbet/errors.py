"""Request-scoped game errors.

Every error here is local and recoverable: it is reported to the player
who made the request and never touches anybody else's state.
"""


class GameError(Exception):
    code = 'game_error'
    default_message = 'Game error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class PlayerNotFound(GameError):
    code = 'player_not_found'
    default_message = 'Player not found'


class DuplicatePlayer(GameError):
    code = 'duplicate_player'
    default_message = 'Player already registered'


class DuplicateBet(GameError):
    code = 'duplicate_bet'
    default_message = 'A bet is already open for this round'


class InsufficientFunds(GameError):
    code = 'insufficient_funds'
    default_message = 'Insufficient balance'


class InvalidAmount(GameError):
    code = 'invalid_amount'
    default_message = 'Amount must not be negative'


class RoundClosed(GameError):
    code = 'round_closed'
    default_message = 'No round is open for betting'
