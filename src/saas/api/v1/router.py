from fastapi import APIRouter

from src.saas.api.v1 import admin, auth, teams, users, webhooks

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(admin.router)
api_router.include_router(webhooks.router)
api_router.include_router(teams.router)
