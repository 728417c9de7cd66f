import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base, utcnow


class CocktailRecipe(Base):
    """CocktailRecipe model - recipes with their ingredient lines"""
    __tablename__ = "cocktail_recipes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False, index=True)
    instructions = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=True)
    garnish = Column(Text, nullable=True)
    source = Column(String, nullable=True)
    cocktail_method_id = Column(
        UUID(as_uuid=True),
        ForeignKey("cocktail_methods.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    image_url = Column(String, nullable=True)

    cocktail_ingredients = relationship(
        "CocktailIngredient",
        back_populates="cocktail",
        cascade="all, delete-orphan",
        order_by="CocktailIngredient.sort",
    )

    user = relationship("User", back_populates="cocktails")
    method = relationship("CocktailMethod", back_populates="cocktails")

    # Property to convert model to schema dictionary
    @property
    def to_schema(self):
        """Convert CocktailRecipe model to schema dictionary format.

        Expects ``cocktail_ingredients`` (with ingredient and substitutes) and
        ``method`` to be eagerly loaded.
        """
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "instructions": self.instructions,
            "description": self.description,
            "garnish": self.garnish,
            "source": self.source,
            "method": self.method.name if self.method else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "image_url": self.image_url,
            "ingredients": [ci.to_schema for ci in self.cocktail_ingredients],
        }
