# omikuji/routers/dependencies.py

from fastapi import Request

from ..services.fortune_service import FortuneService
from ..services.taxonomy import Taxonomy

# Both objects are built once in the application lifespan and kept on app.state.

def get_fortune_service(request: Request) -> FortuneService:
    return request.app.state.fortune_service

def get_taxonomy(request: Request) -> Taxonomy:
    return request.app.state.fortune_service.taxonomy
