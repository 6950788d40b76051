from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ladder.auth import get_current_user
from ladder.database import get_db
from ladder.deps import read_body
from ladder.schemas import MatchListResponse, MatchLoggedResponse, MatchResponse, Principal
from ladder.scoring import parse_match_result
from ladder.services import list_matches, log_match

router = APIRouter()


@router.get("/matches", response_model=MatchListResponse)
async def get_matches(db: AsyncSession = Depends(get_db)):
    matches = await list_matches(db)
    return MatchListResponse(
        message="Matches retrieved successfully",
        count=len(matches),
        matches=[MatchResponse.model_validate(m) for m in matches],
    )


@router.post("/log-match", response_model=MatchLoggedResponse, status_code=201)
async def submit_match(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    result = parse_match_result(await read_body(request))
    new_match = await log_match(db, user, result)
    return MatchLoggedResponse(
        message="Match logged successfully",
        match=MatchResponse.model_validate(new_match),
    )
