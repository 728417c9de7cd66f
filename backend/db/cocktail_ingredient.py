import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class CocktailIngredient(Base):
    """One ingredient line of a cocktail recipe.

    A line is a requirement slot for shelf matching: ``optional`` lines never
    block a cocktail, and any of ``substitutes`` may stand in for the primary
    ingredient.
    """
    __tablename__ = "cocktail_ingredients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cocktail_id = Column(UUID(as_uuid=True), ForeignKey("cocktail_recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(10, 3), nullable=False)
    units = Column(String, nullable=False)  # 'ml', 'oz', 'dash', etc.
    optional = Column(Boolean, nullable=False, default=False)
    sort = Column(Integer, nullable=False, default=0)

    cocktail = relationship("CocktailRecipe", back_populates="cocktail_ingredients")
    ingredient = relationship("Ingredient")
    substitutes = relationship(
        "CocktailIngredientSubstitute",
        back_populates="cocktail_ingredient",
        cascade="all, delete-orphan",
    )

    @property
    def to_schema(self):
        return {
            "ingredient_id": self.ingredient_id,
            "name": self.ingredient.name,
            "amount": float(self.amount),
            "units": self.units,
            "optional": self.optional,
            "sort": self.sort,
            "substitutes": [s.ingredient_id for s in self.substitutes],
        }
