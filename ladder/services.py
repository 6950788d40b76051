import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ladder.errors import StoreError
from ladder.models import Match, Player
from ladder.schemas import Principal
from ladder.scoring import MatchResult, winner_of

logger = logging.getLogger(__name__)


async def log_match(db: AsyncSession, principal: Principal, result: MatchResult) -> Match:
    """Append a match and credit the winner, both in one transaction.

    A draw credits nobody. A winner with no row in the ledger is logged and
    otherwise ignored.
    """
    new_match = Match(
        first_player_name=result.first_player,
        second_player_name=result.second_player,
        first_player_score=result.first_player_score,
        second_player_score=result.second_player_score,
    )
    winner = winner_of(result)

    try:
        db.add(new_match)
        await db.flush()  # assigns match.id

        if winner is not None:
            updated = await db.execute(
                update(Player)
                .where(Player.name == winner)
                .values(victories=Player.victories + 1)
            )
            if updated.rowcount == 0:
                logger.warning("Match %s: winner %r is not in the ledger, no victory recorded",
                               new_match.id, winner)

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error logging match: %s", e, exc_info=True)
        raise StoreError(error=str(e))

    logger.info(
        "Match %s logged by %s: %s %s-%s %s",
        new_match.id, principal.username,
        new_match.first_player_name, new_match.first_player_score,
        new_match.second_player_score, new_match.second_player_name,
    )
    return new_match


async def list_matches(db: AsyncSession):
    try:
        result = await db.execute(select(Match).order_by(Match.match_date.desc(), Match.id.desc()))
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error("Get matches error: %s", e, exc_info=True)
        raise StoreError(error=str(e))


async def list_players(db: AsyncSession):
    try:
        result = await db.execute(select(Player).order_by(Player.victories.desc(), Player.id.asc()))
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error("Get players error: %s", e, exc_info=True)
        raise StoreError(error=str(e))
