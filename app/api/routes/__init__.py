from fastapi import APIRouter
from app.api.routes import files, test_cases, health

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router)
api_router.include_router(files.router)
api_router.include_router(test_cases.router)
