from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from db.database import Base, import_models
from db.cocktail_ingredient import CocktailIngredient
from db.cocktail_ingredient_substitute import CocktailIngredientSubstitute
from db.cocktail_recipe import CocktailRecipe
from db.ingredient import Ingredient
from db.user_ingredient import UserIngredient
from db.users import User


class Bar:
    """Builds shelf and recipe rows for a test database."""

    def __init__(self, session):
        self.session = session
        self.ingredients = {}

    async def user(self, email: str, superuser: bool = False) -> User:
        user = User(email=email, hashed_password="x", is_active=True, is_superuser=superuser, is_verified=True)
        self.session.add(user)
        await self.session.flush()
        return user

    async def ingredient(self, name: str, parent: str = None) -> Ingredient:
        ingredient = Ingredient(
            name=name,
            parent_ingredient_id=self.ingredients[parent].id if parent else None,
        )
        self.session.add(ingredient)
        await self.session.flush()
        self.ingredients[name] = ingredient
        return ingredient

    async def cocktail(self, owner: User, name: str, lines) -> CocktailRecipe:
        """``lines`` holds (ingredient name, optional, [substitute names]) tuples."""
        cocktail = CocktailRecipe(name=name, instructions="", user_id=owner.id)
        self.session.add(cocktail)
        await self.session.flush()
        for sort, (ingredient_name, optional, substitutes) in enumerate(lines, start=1):
            line = CocktailIngredient(
                cocktail_id=cocktail.id,
                ingredient_id=self.ingredients[ingredient_name].id,
                amount=Decimal("30"),
                units="ml",
                optional=optional,
                sort=sort,
            )
            self.session.add(line)
            await self.session.flush()
            for sub_name in substitutes:
                self.session.add(
                    CocktailIngredientSubstitute(
                        cocktail_ingredient_id=line.id,
                        ingredient_id=self.ingredients[sub_name].id,
                    )
                )
        await self.session.flush()
        return cocktail

    async def shelve(self, user: User, *names: str):
        for name in names:
            self.session.add(UserIngredient(user_id=user.id, ingredient_id=self.ingredients[name].id))
        await self.session.flush()


@pytest.fixture
async def engine(tmp_path):
    import_models()
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'bar.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def bar(session):
    """Gin family, a Negroni with a vermouth substitute and a few others."""
    bar = Bar(session)
    bar.owner = await bar.user("owner@example.com")

    for name in ("Gin", "Campari", "Sweet Vermouth", "Red Vermouth", "Tonic Water", "Orange Bitters", "Water"):
        await bar.ingredient(name)
    await bar.ingredient("London Dry Gin", parent="Gin")
    await bar.ingredient("Old Tom Gin", parent="Gin")

    bar.negroni = await bar.cocktail(bar.owner, "Negroni", [
        ("Gin", False, []),
        ("Campari", False, []),
        ("Sweet Vermouth", False, ["Red Vermouth"]),
    ])
    bar.tom_and_tonic = await bar.cocktail(bar.owner, "Tom and Tonic", [
        ("Old Tom Gin", False, []),
        ("Tonic Water", False, []),
        ("Orange Bitters", True, []),
    ])
    bar.water = await bar.cocktail(bar.owner, "Glass of Water", [
        ("Water", True, []),
    ])
    await session.commit()
    return bar
