from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List

from db.database import get_async_session
from db.cocktail_method import CocktailMethod as CocktailMethodModel

router = APIRouter()


@router.get("/", response_model=List[Dict])
async def list_cocktail_methods(db: AsyncSession = Depends(get_async_session)):
    res = await db.execute(select(CocktailMethodModel).order_by(func.lower(CocktailMethodModel.name).asc()))
    methods = res.scalars().all()
    return [{"id": m.id, "name": m.name, "dilution_percentage": m.dilution_percentage} for m in methods]
