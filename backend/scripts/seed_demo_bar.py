import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

"""
Seed a demo bar (methods, ingredients with varieties, cocktails and a shelf).

This script can be run from either:
- backend/: `uv run python scripts/seed_demo_bar.py`
- repo root: `uv run python backend/scripts/seed_demo_bar.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select  # noqa: E402

from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.users import User  # noqa: E402
from db.ingredient import Ingredient  # noqa: E402
from db.cocktail_method import CocktailMethod  # noqa: E402
from db.cocktail_recipe import CocktailRecipe  # noqa: E402
from db.cocktail_ingredient import CocktailIngredient  # noqa: E402
from db.cocktail_ingredient_substitute import CocktailIngredientSubstitute  # noqa: E402
from db.user_ingredient import UserIngredient  # noqa: E402

from fastapi_users.password import PasswordHelper  # noqa: E402


password_helper = PasswordHelper()

METHODS = [("Shake", 25), ("Stir", 20), ("Build", 10)]

# name -> (strength, parent name)
INGREDIENTS = {
    "Gin": (Decimal("40"), None),
    "London Dry Gin": (Decimal("43"), "Gin"),
    "Old Tom Gin": (Decimal("40"), "Gin"),
    "Campari": (Decimal("25"), None),
    "Sweet Vermouth": (Decimal("16"), None),
    "Red Vermouth": (Decimal("15"), None),
    "Dry Vermouth": (Decimal("18"), None),
    "White Rum": (Decimal("40"), None),
    "Lime Juice": (None, None),
    "Simple Syrup": (None, None),
    "Tonic Water": (None, None),
    "Orange Bitters": (Decimal("28"), None),
    "Angostura Bitters": (Decimal("44.7"), None),
}

# name, method, instructions, [(ingredient, amount, units, optional, substitutes)]
COCKTAILS = [
    ("Negroni", "Stir", "Stir with ice and strain over a large cube.", [
        ("Gin", 30, "ml", False, []),
        ("Campari", 30, "ml", False, []),
        ("Sweet Vermouth", 30, "ml", False, ["Red Vermouth"]),
    ]),
    ("Martini", "Stir", "Stir with ice and strain into a chilled coupe.", [
        ("London Dry Gin", 60, "ml", False, []),
        ("Dry Vermouth", 15, "ml", False, []),
        ("Orange Bitters", 1, "dash", True, []),
    ]),
    ("Gin and Tonic", "Build", "Build over ice.", [
        ("Gin", 50, "ml", False, []),
        ("Tonic Water", 100, "ml", False, []),
        ("Angostura Bitters", 1, "dash", True, []),
    ]),
    ("Daiquiri", "Shake", "Shake hard with ice and double strain.", [
        ("White Rum", 60, "ml", False, []),
        ("Lime Juice", 22.5, "ml", False, []),
        ("Simple Syrup", 15, "ml", False, []),
    ]),
]

SHELF = ["London Dry Gin", "Campari", "Red Vermouth", "Tonic Water"]


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )
    session.add(user)
    await session.flush()
    return user


async def get_or_create_method(session, name: str, dilution: int) -> CocktailMethod:
    result = await session.execute(select(CocktailMethod).where(CocktailMethod.name == name))
    method = result.scalar_one_or_none()
    if method:
        return method

    method = CocktailMethod(name=name, dilution_percentage=dilution)
    session.add(method)
    await session.flush()
    return method


async def get_or_create_ingredient(session, name: str, strength=None, parent: Ingredient = None) -> Ingredient:
    result = await session.execute(
        select(Ingredient).where(func.lower(Ingredient.name) == name.strip().lower())
    )
    ingredient = result.scalar_one_or_none()
    if ingredient:
        return ingredient

    ingredient = Ingredient(
        name=name.strip(),
        strength=strength,
        parent_ingredient_id=parent.id if parent else None,
    )
    session.add(ingredient)
    await session.flush()
    return ingredient


async def create_cocktail(session, user: User, method: CocktailMethod, name: str, instructions: str, lines, ingredients):
    result = await session.execute(select(CocktailRecipe).where(CocktailRecipe.name == name))
    if result.scalar_one_or_none():
        return False

    cocktail = CocktailRecipe(
        name=name,
        instructions=instructions,
        user_id=user.id,
        cocktail_method_id=method.id,
    )
    session.add(cocktail)
    await session.flush()

    for sort, (ingredient_name, amount, units, optional, substitutes) in enumerate(lines, start=1):
        line = CocktailIngredient(
            cocktail_id=cocktail.id,
            ingredient_id=ingredients[ingredient_name].id,
            amount=Decimal(str(amount)),
            units=units,
            optional=optional,
            sort=sort,
        )
        session.add(line)
        await session.flush()
        for sub_name in substitutes:
            session.add(
                CocktailIngredientSubstitute(
                    cocktail_ingredient_id=line.id,
                    ingredient_id=ingredients[sub_name].id,
                )
            )
    return True


async def main(email: str, password: str) -> None:
    await create_db_and_tables()

    async with async_session_maker() as session:
        user = await get_or_create_user(session, email, password)

        methods = {}
        for name, dilution in METHODS:
            methods[name] = await get_or_create_method(session, name, dilution)

        ingredients = {}
        # Parents first so varieties can point at them
        for name, (strength, parent_name) in sorted(INGREDIENTS.items(), key=lambda kv: kv[1][1] is not None):
            parent = ingredients[parent_name] if parent_name else None
            ingredients[name] = await get_or_create_ingredient(session, name, strength, parent)

        created = 0
        for name, method_name, instructions, lines in COCKTAILS:
            if await create_cocktail(session, user, methods[method_name], name, instructions, lines, ingredients):
                created += 1

        result = await session.execute(
            select(UserIngredient.ingredient_id).where(UserIngredient.user_id == user.id)
        )
        owned = set(result.scalars().all())
        for name in SHELF:
            if ingredients[name].id not in owned:
                session.add(UserIngredient(user_id=user.id, ingredient_id=ingredients[name].id))

        await session.commit()

    print(f"[seed_demo_bar] user={email} ingredients={len(ingredients)} created_cocktails={created}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo bar")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default="admin")
    args = parser.parse_args()
    asyncio.run(main(args.email, args.password))
