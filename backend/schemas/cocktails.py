from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime


class CocktailIngredientLine(BaseModel):
    ingredient_id: UUID
    name: str
    amount: float
    units: str
    optional: bool = False
    sort: int = 0
    substitutes: List[UUID] = []


class CocktailRecipe(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    instructions: str
    description: Optional[str] = None
    garnish: Optional[str] = None
    source: Optional[str] = None
    method: Optional[str] = None
    created_at: Optional[datetime] = None
    image_url: Optional[str] = None
    ingredients: List[CocktailIngredientLine]
