import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.cocktail_ingredient import CocktailIngredient
from db.cocktail_ingredient_substitute import CocktailIngredientSubstitute
from db.cocktail_recipe import CocktailRecipe
from db.ingredient import Ingredient
from db.user_ingredient import UserIngredient
from services.matching import (
    DirectOwnership,
    MatchingConfig,
    RequirementSlot,
    direct_matches,
    feasible_cocktail_ids,
    resolve_ownership,
)

logger = logging.getLogger(__name__)


def get_matching_config() -> MatchingConfig:
    """FastAPI dependency: snapshot of the matching switches for one request."""
    return MatchingConfig(
        parent_ingredient_as_substitute=settings.parent_ingredient_as_substitute,
    )


class ShelfMatcher:
    """Loads shelf and recipe rows for one request and runs the matching rules.

    Read-only. Database errors are left to propagate to the caller.
    """

    def __init__(self, db: AsyncSession, config: MatchingConfig):
        self.db = db
        self.config = config

    async def owned_ingredient_ids(self, user_id: UUID) -> List[UUID]:
        result = await self.db.execute(
            select(UserIngredient.ingredient_id).where(UserIngredient.user_id == user_id)
        )
        return list(result.scalars().all())

    async def parent_map(self) -> Dict[UUID, UUID]:
        result = await self.db.execute(
            select(Ingredient.id, Ingredient.parent_ingredient_id)
            .where(Ingredient.parent_ingredient_id.is_not(None))
        )
        return {row.id: row.parent_ingredient_id for row in result}

    async def catalogue(self) -> Tuple[List[UUID], List[RequirementSlot]]:
        """Every cocktail id with its required lines, read in a single statement.

        Cocktails without required lines still come back (one row with no line).
        """
        stmt = (
            select(
                CocktailRecipe.id.label("cocktail_id"),
                CocktailIngredient.id.label("line_id"),
                CocktailIngredient.ingredient_id.label("ingredient_id"),
                CocktailIngredient.sort.label("sort"),
                CocktailIngredientSubstitute.ingredient_id.label("substitute_id"),
            )
            .outerjoin(
                CocktailIngredient,
                and_(
                    CocktailIngredient.cocktail_id == CocktailRecipe.id,
                    CocktailIngredient.optional.is_(False),
                ),
            )
            .outerjoin(
                CocktailIngredientSubstitute,
                CocktailIngredientSubstitute.cocktail_ingredient_id == CocktailIngredient.id,
            )
            .order_by(CocktailRecipe.id, CocktailIngredient.sort)
        )
        result = await self.db.execute(stmt)

        cocktail_ids: List[UUID] = []
        lines: Dict[UUID, dict] = {}
        for row in result:
            if not cocktail_ids or cocktail_ids[-1] != row.cocktail_id:
                cocktail_ids.append(row.cocktail_id)
            if row.line_id is None:
                continue
            line = lines.setdefault(row.line_id, {
                "cocktail_id": row.cocktail_id,
                "ingredient_id": row.ingredient_id,
                "sort": row.sort or 0,
                "substitutes": set(),
            })
            if row.substitute_id is not None:
                line["substitutes"].add(row.substitute_id)

        slots = [
            RequirementSlot(
                cocktail_id=line["cocktail_id"],
                ingredient_id=line["ingredient_id"],
                substitutes=frozenset(line["substitutes"]),
                sort=line["sort"],
            )
            for line in lines.values()
        ]
        return cocktail_ids, slots

    async def resolve_ownership(self, user_id: UUID) -> DirectOwnership:
        owned_ids = await self.owned_ingredient_ids(user_id)
        if not self.config.parent_ingredient_as_substitute:
            return resolve_ownership(owned_ids, self.config)
        return resolve_ownership(owned_ids, self.config, await self.parent_map())

    async def get_cocktails_by_user_ingredients(self, user_id: UUID, limit: Optional[int] = None) -> List[UUID]:
        """Ids of every cocktail the user can make from their shelf."""
        ownership = await self.resolve_ownership(user_id)
        cocktail_ids, slots = await self.catalogue()

        feasible = feasible_cocktail_ids(cocktail_ids, slots, ownership, limit=limit)
        logger.debug(
            "[shelf] user=%s owns=%d feasible=%d/%d parent_as_substitute=%s",
            user_id,
            len(ownership.owned_ids),
            len(feasible),
            len(cocktail_ids),
            self.config.parent_ingredient_as_substitute,
        )
        return feasible

    async def match_available_shelf_ingredients(self, cocktail_id: UUID, user_id: UUID) -> List[UUID]:
        """Cocktail ingredients the user owns directly, without substitutes.

        Recipe lines and shelf rows come from one joined statement.
        """
        result = await self.db.execute(
            select(
                CocktailIngredient.ingredient_id,
                CocktailIngredient.sort,
                UserIngredient.ingredient_id.label("owned_id"),
            )
            .outerjoin(
                UserIngredient,
                and_(
                    UserIngredient.ingredient_id == CocktailIngredient.ingredient_id,
                    UserIngredient.user_id == user_id,
                ),
            )
            .where(CocktailIngredient.cocktail_id == cocktail_id)
        )
        rows = result.all()
        slots = [
            RequirementSlot(cocktail_id=cocktail_id, ingredient_id=row.ingredient_id, sort=row.sort or 0)
            for row in rows
        ]
        return direct_matches(slots, [row.owned_id for row in rows if row.owned_id is not None])
