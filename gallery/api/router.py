from fastapi import APIRouter

from gallery.features.auth.api import router as auth_router
from gallery.features.files.api import router as files_router
from gallery.features.gallery.api import router as gallery_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(gallery_router)
api_router.include_router(files_router)
