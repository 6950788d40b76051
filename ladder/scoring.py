from typing import NamedTuple, Optional

from ladder.errors import InvalidScoreType, MissingField, SamePlayer, ValidationError

MATCH_FIELDS = ("first_player", "second_player", "first_player_score", "second_player_score")


class MatchResult(NamedTuple):
    first_player: str
    second_player: str
    first_player_score: int
    second_player_score: int


def _as_score(value):
    # bool is an int subclass but never a score
    if isinstance(value, bool):
        raise InvalidScoreType()
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidScoreType()


def parse_match_result(data: dict) -> MatchResult:
    """Validate a raw match payload.

    Checks run in a fixed order so each bad payload maps to exactly one error:
    missing field, same player, non-numeric score, non-string name.
    """
    first_player = data.get("first_player")
    second_player = data.get("second_player")

    if not first_player or not second_player \
            or "first_player_score" not in data or "second_player_score" not in data:
        raise MissingField()

    if first_player == second_player:
        raise SamePlayer()

    first_score = _as_score(data["first_player_score"])
    second_score = _as_score(data["second_player_score"])

    if not isinstance(first_player, str) or not isinstance(second_player, str):
        raise ValidationError("Player names must be strings")

    return MatchResult(first_player, second_player, first_score, second_score)


def winner_of(result: MatchResult) -> Optional[str]:
    if result.first_player_score > result.second_player_score:
        return result.first_player
    if result.second_player_score > result.first_player_score:
        return result.second_player
    return None
