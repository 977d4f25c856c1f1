"""
HTTP中间件模块
"""
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP请求日志中间件"""
    
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        
        response = await call_next(request)
        
        # 记录处理时间，同时写入响应头
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"{client_ip} {request.method} {request.url.path} - {response.status_code} - {process_time:.4f}s")
        
        return response
