"""
系统级API路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from admin_console.core.config import settings
from admin_console.db.session import get_db
from admin_console.services.redis_client import redis_client

router = APIRouter()

@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """健康检查接口"""
    checks = {}
    
    # 检查数据库连接
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = True
    except SQLAlchemyError:
        checks["database"] = False
    
    # 检查Redis连接
    checks["redis"] = redis_client.ping()
    
    overall_status = "healthy" if all(checks.values()) else "unhealthy"
    
    return {
        "status": overall_status,
        "services": checks
    }

@router.get("/version")
def get_version():
    """获取系统版本信息"""
    return {
        "project": {
            "name": settings.PROJECT_NAME,
            "description": settings.PROJECT_DESCRIPTION,
            "version": settings.PROJECT_VERSION
        },
        "api": {
            "prefix": settings.API_V1_STR
        },
        "debug_mode": settings.DEBUG
    }
