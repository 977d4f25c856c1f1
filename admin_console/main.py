#!/usr/bin/env python
# -*- coding: utf-8 -*-
import logging
import os
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admin_console.core.config import settings
from admin_console.api import api_router
from admin_console.core.exceptions import register_exception_handlers
from admin_console.core.middleware import RequestLoggingMiddleware
from admin_console.modules.system.middleware import AuthMiddleware
from admin_console.services.redis_client import init_redis, close_redis

# 配置日志
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
log_handlers = [logging.StreamHandler(sys.stdout)]
if settings.LOG_FILE:
    log_handlers.append(logging.FileHandler(os.path.join(settings.BASE_DIR, settings.LOG_FILE)))
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=log_handlers
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动与关闭"""
    logger.info(f"🚀 启动 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}")
    if not init_redis():
        logger.warning("⚠️ Redis不可用，登录会话校验将失败")
    yield
    close_redis()
    logger.info("✅ 应用已关闭")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan
)

# 配置中间件，后添加的在外层
app.add_middleware(AuthMiddleware, enable_auth=settings.ENABLE_AUTH)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 注册API路由
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """根路径，返回API基本信息"""
    return {
        "name": settings.PROJECT_NAME,
        "description": settings.PROJECT_DESCRIPTION,
        "version": settings.PROJECT_VERSION,
        "status": "running",
        "api_docs": "/docs"
    }


def serve():
    """启动REST API服务"""
    logger.info(f"🚀 启动REST API服务，端口 {settings.REST_PORT}...")
    uvicorn.run(
        "admin_console.main:app",
        host="0.0.0.0",
        port=settings.REST_PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    serve()
