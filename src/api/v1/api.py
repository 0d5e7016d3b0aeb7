from fastapi import APIRouter
from .endpoints import friendship

api_router = APIRouter()

# 注册好友相关路由
api_router.include_router(friendship.router, prefix="/friends", tags=["friends"])
