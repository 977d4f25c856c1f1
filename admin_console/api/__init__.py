"""
API包，提供REST API接口
"""
from fastapi import APIRouter
from . import system
from admin_console.modules.system.controllers import (
    account_controller, auth_controller, dept_controller, notice_controller,
    role_controller, user_controller
)

api_router = APIRouter()
api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(auth_controller.router)
api_router.include_router(account_controller.router)
api_router.include_router(user_controller.router)
api_router.include_router(dept_controller.router)
api_router.include_router(role_controller.router)
api_router.include_router(notice_controller.router)

__all__ = ["api_router"]
