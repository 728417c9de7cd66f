import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base, utcnow


class Ingredient(Base):
    """Ingredient model - reusable ingredients with unique id and name"""
    __tablename__ = "ingredients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)  # Unique ingredient names
    description = Column(Text, nullable=True)
    strength = Column(Numeric(5, 2), nullable=True)  # ABV %
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Single level: a variety points to its generic parent (London Dry Gin -> Gin)
    parent_ingredient_id = Column(
        UUID(as_uuid=True),
        ForeignKey("ingredients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    parent_ingredient = relationship("Ingredient", remote_side=[id], back_populates="varieties")
    varieties = relationship("Ingredient", back_populates="parent_ingredient")

    # Property to convert model to schema dictionary
    @property
    def to_schema(self):
        """Convert Ingredient model to schema dictionary format"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "strength": float(self.strength) if self.strength is not None else None,
            "parent_ingredient_id": self.parent_ingredient_id,
        }
