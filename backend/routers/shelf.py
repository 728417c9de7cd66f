import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from db.database import get_async_session
from db.ingredient import Ingredient as IngredientModel
from db.user_ingredient import UserIngredient as UserIngredientModel
from db.users import User
from schemas.ingredient import Ingredient
from schemas.shelf import ShelfCocktails, ShelfIngredientsAdd, ShelfMatches
from services.matching import MatchingConfig
from services.shelf_matcher import ShelfMatcher, get_matching_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[Ingredient])
async def get_shelf_ingredients(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Get the ingredients on the current user's shelf"""
    result = await db.execute(
        select(IngredientModel)
        .join(UserIngredientModel, UserIngredientModel.ingredient_id == IngredientModel.id)
        .where(UserIngredientModel.user_id == user.id)
        .order_by(IngredientModel.name)
    )
    return [ingredient.to_schema for ingredient in result.scalars().all()]


@router.post("/", response_model=List[Ingredient], status_code=status.HTTP_201_CREATED)
async def add_shelf_ingredients(
    payload: ShelfIngredientsAdd,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Add ingredients to the current user's shelf. Already owned ones are skipped."""
    requested = list(dict.fromkeys(payload.ingredient_ids))
    result = await db.execute(select(IngredientModel.id).where(IngredientModel.id.in_(requested)))
    known = set(result.scalars().all())
    missing = [str(i) for i in requested if i not in known]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ingredients not found: {', '.join(missing)}"
        )

    result = await db.execute(
        select(UserIngredientModel.ingredient_id).where(
            UserIngredientModel.user_id == user.id,
            UserIngredientModel.ingredient_id.in_(requested),
        )
    )
    owned = set(result.scalars().all())

    try:
        for ingredient_id in requested:
            if ingredient_id not in owned:
                db.add(UserIngredientModel(user_id=user.id, ingredient_id=ingredient_id))
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception("[shelf] add failed for user %s", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error adding shelf ingredients: {str(e)}"
        )

    return await get_shelf_ingredients(user=user, db=db)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_shelf_ingredient(
    ingredient_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Remove an ingredient from the current user's shelf"""
    try:
        await db.execute(
            delete(UserIngredientModel).where(
                UserIngredientModel.user_id == user.id,
                UserIngredientModel.ingredient_id == ingredient_id,
            )
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception("[shelf] remove failed for user %s", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error removing shelf ingredient: {str(e)}"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/cocktails", response_model=ShelfCocktails)
async def get_shelf_cocktails(
    limit: Optional[int] = Query(default=None, ge=1),
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
    config: MatchingConfig = Depends(get_matching_config),
):
    """Cocktails the current user can make with the ingredients on their shelf"""
    matcher = ShelfMatcher(db, config)
    cocktail_ids = await matcher.get_cocktails_by_user_ingredients(user.id, limit=limit)
    return {"cocktail_ids": cocktail_ids}


@router.get("/cocktails/{cocktail_id}/matches", response_model=ShelfMatches)
async def get_shelf_matches(
    cocktail_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
    config: MatchingConfig = Depends(get_matching_config),
):
    """Ingredients of a cocktail that are directly on the current user's shelf"""
    matcher = ShelfMatcher(db, config)
    ingredient_ids = await matcher.match_available_shelf_ingredients(cocktail_id, user.id)
    return {"cocktail_id": cocktail_id, "ingredient_ids": ingredient_ids}
