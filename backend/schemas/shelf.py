from pydantic import BaseModel, Field
from typing import List
from uuid import UUID


class ShelfIngredientsAdd(BaseModel):
    ingredient_ids: List[UUID] = Field(min_length=1)


class ShelfCocktails(BaseModel):
    cocktail_ids: List[UUID]


class ShelfMatches(BaseModel):
    cocktail_id: UUID
    ingredient_ids: List[UUID]
