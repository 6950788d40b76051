from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ladder.database import get_db
from ladder.schemas import PlayerListResponse, PlayerResponse
from ladder.services import list_players

router = APIRouter()


@router.get("/players", response_model=PlayerListResponse)
async def get_players(db: AsyncSession = Depends(get_db)):
    players = await list_players(db)
    return PlayerListResponse(
        message="Players retrieved successfully",
        count=len(players),
        players=[PlayerResponse.model_validate(p) for p in players],
    )
