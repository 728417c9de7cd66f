import uuid
from sqlalchemy import Column, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .database import Base


class CocktailMethod(Base):
    __tablename__ = "cocktail_methods"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True, index=True)
    dilution_percentage = Column(Integer, nullable=False, default=0)

    cocktails = relationship("CocktailRecipe", back_populates="method")
