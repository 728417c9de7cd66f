from fastapi import APIRouter, Request

from core.config import settings

router = APIRouter()


@router.get("/")
async def get_status():
    return {"status": "available"}


@router.get("/version")
async def get_version():
    return {
        "data": {
            "name": settings.app_name,
            "version": settings.app_version,
            "type": settings.app_env,
        }
    }


@router.get("/openapi")
async def get_openapi(request: Request):
    """The generated OpenAPI document of this API"""
    return request.app.openapi()
