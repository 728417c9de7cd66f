from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID


class Ingredient(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    strength: Optional[float] = None
    parent_ingredient_id: Optional[UUID] = None


class IngredientCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    strength: Optional[Decimal] = Field(default=None, ge=0, le=100)
    parent_ingredient_id: Optional[UUID] = None


class IngredientUpdate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    strength: Optional[Decimal] = Field(default=None, ge=0, le=100)
    parent_ingredient_id: Optional[UUID] = None


class IngredientDetail(Ingredient):
    varieties: List[UUID] = []
