from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.logging_config import setup_logging
from db.database import create_db_and_tables
from routers.server import router as server_router
from routers.shelf import router as shelf_router
from routers.cocktails import router as cocktails_router
from routers.cocktail_methods import router as cocktail_methods_router
from routers.ingredients import router as ingredients_router
from core.auth import fastapi_users, auth_backend
from contextlib import asynccontextmanager
from schemas.users import UserRead, UserCreate, UserUpdate


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Refuse to start without a signing secret in production
    settings.jwt_secret()
    await create_db_and_tables()
    yield


app = FastAPI(
    title=settings.app_name,
    description="API for managing a home bar shelf and the cocktails it can make",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"],)
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_reset_password_router(), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_verify_router(UserRead), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])

app.include_router(server_router, prefix="/server", tags=["server"])

# Shelf and matching routes
app.include_router(shelf_router, prefix="/shelf", tags=["shelf"])

# Cocktail recipe routes
app.include_router(cocktails_router, prefix="/cocktail-recipes", tags=["cocktails"])
app.include_router(cocktail_methods_router, prefix="/cocktail-methods", tags=["cocktail-methods"])
app.include_router(ingredients_router, prefix="/ingredients", tags=["ingredients"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
