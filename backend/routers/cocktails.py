from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from db.database import get_async_session
from db.cocktail_recipe import CocktailRecipe as CocktailRecipeModel
from db.cocktail_ingredient import CocktailIngredient as CocktailIngredientModel
from schemas.cocktails import CocktailRecipe
from typing import List
from uuid import UUID

router = APIRouter()


def _with_lines(stmt):
    return stmt.options(
        selectinload(CocktailRecipeModel.cocktail_ingredients).selectinload(CocktailIngredientModel.ingredient),
        selectinload(CocktailRecipeModel.cocktail_ingredients).selectinload(CocktailIngredientModel.substitutes),
        selectinload(CocktailRecipeModel.method),
    )


@router.get("/", response_model=List[CocktailRecipe])
async def get_cocktails(db: AsyncSession = Depends(get_async_session)):
    """Get all cocktail recipes"""
    result = await db.execute(_with_lines(select(CocktailRecipeModel)).order_by(CocktailRecipeModel.name))
    cocktails = result.scalars().all()
    return [cocktail.to_schema for cocktail in cocktails]


@router.get("/{cocktail_id}", response_model=CocktailRecipe)
async def get_cocktail_recipe(cocktail_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get a single cocktail recipe by ID"""
    result = await db.execute(
        _with_lines(select(CocktailRecipeModel)).where(CocktailRecipeModel.id == cocktail_id)
    )
    cocktail = result.scalar_one_or_none()

    if not cocktail:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cocktail with id {cocktail_id} not found"
        )

    return cocktail.to_schema
