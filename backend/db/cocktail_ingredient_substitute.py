import uuid
from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class CocktailIngredientSubstitute(Base):
    """Alternate ingredient that can fill a cocktail ingredient line"""
    __tablename__ = "cocktail_ingredient_substitutes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cocktail_ingredient_id = Column(
        UUID(as_uuid=True),
        ForeignKey("cocktail_ingredients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True)

    cocktail_ingredient = relationship("CocktailIngredient", back_populates="substitutes")
    ingredient = relationship("Ingredient")
