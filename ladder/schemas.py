from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Principal(BaseModel):
    id: int
    username: str


class UserSummary(BaseModel):
    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class LoggedInResponse(BaseModel):
    loggedIn: bool


class PlayerResponse(BaseModel):
    id: int
    name: str
    victories: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MatchResponse(BaseModel):
    id: int
    first_player_name: str
    second_player_name: str
    first_player_score: int
    second_player_score: int
    match_date: datetime
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PlayerListResponse(BaseModel):
    message: str
    count: int
    players: List[PlayerResponse]


class MatchListResponse(BaseModel):
    message: str
    count: int
    matches: List[MatchResponse]


class MatchLoggedResponse(BaseModel):
    message: str
    match: MatchResponse
