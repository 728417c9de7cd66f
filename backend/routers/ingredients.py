import logging
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from schemas.ingredient import Ingredient, IngredientCreate, IngredientDetail, IngredientUpdate
from db.database import get_async_session
from db.ingredient import Ingredient as IngredientModel
from typing import List, Optional
from uuid import UUID
from core.auth import current_active_user
from db.users import User

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_404(db: AsyncSession, ingredient_id: UUID) -> IngredientModel:
    result = await db.execute(select(IngredientModel).where(IngredientModel.id == ingredient_id))
    ingredient = result.scalar_one_or_none()
    if not ingredient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ingredient with id {ingredient_id} not found"
        )
    return ingredient


async def _check_name_free(db: AsyncSession, name: str, own_id: Optional[UUID] = None):
    # Names are unique case-insensitively
    result = await db.execute(
        select(IngredientModel).where(func.lower(IngredientModel.name) == name.strip().lower())
    )
    existing = result.scalar_one_or_none()
    if existing and existing.id != own_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ingredient named '{existing.name}' already exists"
        )


async def _check_parent(db: AsyncSession, parent_id: Optional[UUID], own_id: Optional[UUID] = None):
    # Varieties hang off generic ingredients, one level deep
    if parent_id is None:
        return
    if parent_id == own_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ingredient cannot be its own parent"
        )
    result = await db.execute(select(IngredientModel).where(IngredientModel.id == parent_id))
    parent = result.scalar_one_or_none()
    if parent is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Parent ingredient with id {parent_id} not found"
        )
    if parent.parent_ingredient_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Parent ingredient '{parent.name}' is itself a variety"
        )
    if own_id is not None:
        result = await db.execute(
            select(IngredientModel.id).where(IngredientModel.parent_ingredient_id == own_id).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ingredient with varieties cannot have a parent"
            )


async def _commit(db: AsyncSession, action: str):
    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception("[ingredients] %s failed", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error trying to {action} ingredient: {str(e)}"
        )


@router.get("/", response_model=List[Ingredient])
async def get_ingredients(db: AsyncSession = Depends(get_async_session)):
    """Get all ingredients"""
    result = await db.execute(select(IngredientModel).order_by(IngredientModel.name))
    ingredients = result.scalars().all()
    return [ingredient.to_schema for ingredient in ingredients]


@router.get("/{ingredient_id}", response_model=IngredientDetail)
async def get_ingredient(ingredient_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get an ingredient by ID, with the ids of its varieties"""
    ingredient = await _get_or_404(db, ingredient_id)
    result = await db.execute(
        select(IngredientModel.id).where(IngredientModel.parent_ingredient_id == ingredient_id)
    )
    return {**ingredient.to_schema, "varieties": list(result.scalars().all())}


@router.post("/", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
async def create_ingredient(ingredient: IngredientCreate, user: User = Depends(current_active_user), db: AsyncSession = Depends(get_async_session)):
    """Create a new ingredient"""
    if not user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to create ingredients"
        )
    await _check_name_free(db, ingredient.name)
    await _check_parent(db, ingredient.parent_ingredient_id)

    # Preserve original casing
    ingredient_model = IngredientModel(
        name=ingredient.name.strip(),
        description=ingredient.description,
        strength=ingredient.strength,
        parent_ingredient_id=ingredient.parent_ingredient_id,
    )
    db.add(ingredient_model)
    await _commit(db, "create")
    await db.refresh(ingredient_model)
    logger.info("[ingredients] created %s (%s)", ingredient_model.name, ingredient_model.id)
    return ingredient_model.to_schema


@router.put("/{ingredient_id}", response_model=Ingredient)
async def update_ingredient(ingredient_id: UUID, ingredient: IngredientUpdate, user: User = Depends(current_active_user), db: AsyncSession = Depends(get_async_session)):
    """Update an existing ingredient"""
    if not user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to update this ingredient"
        )
    ingredient_model = await _get_or_404(db, ingredient_id)
    await _check_name_free(db, ingredient.name, own_id=ingredient_id)
    await _check_parent(db, ingredient.parent_ingredient_id, own_id=ingredient_id)

    ingredient_model.name = ingredient.name.strip()
    ingredient_model.description = ingredient.description
    ingredient_model.strength = ingredient.strength
    ingredient_model.parent_ingredient_id = ingredient.parent_ingredient_id
    await _commit(db, "update")
    await db.refresh(ingredient_model)
    return ingredient_model.to_schema


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(ingredient_id: UUID, user: User = Depends(current_active_user), db: AsyncSession = Depends(get_async_session)):
    """Delete an existing ingredient"""
    # Ingredients are shared resources
    if not user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to delete this ingredient"
        )
    ingredient_model = await _get_or_404(db, ingredient_id)
    await db.delete(ingredient_model)
    await _commit(db, "delete")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
