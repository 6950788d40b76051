from typing import Optional


class LadderError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.message
        self.error = error
        super().__init__(self.message)

    def to_dict(self):
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


# 400
class ValidationError(LadderError):
    status_code = 400
    message = "Invalid request"


class MissingField(ValidationError):
    message = "All fields are required: first_player, second_player, first_player_score, second_player_score"


class SamePlayer(ValidationError):
    message = "Players must be different"


class InvalidScoreType(ValidationError):
    message = "Scores must be numbers"


# 401
class Unauthenticated(LadderError):
    status_code = 401
    message = "Access token required"


class InvalidCredentials(LadderError):
    status_code = 401
    message = "Invalid credentials"


# 403
class Forbidden(LadderError):
    status_code = 403
    message = "Invalid or expired token"


# 500
class StoreError(LadderError):
    status_code = 500
    message = "Server error"
