"""
消息推送控制器
"""
import asyncio
import logging
from fastapi import APIRouter, Request, Response

from admin_console.core.config import settings
from admin_console.modules.system.middleware import get_current_user_id
from admin_console.services.sse_connection_manager import sse_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sys/notice", tags=["消息推送"])


@router.get("/stream", summary="账号消息SSE流")
async def notice_stream(request: Request):
    """
    创建SSE连接，推送当前账号的消息（如菜单权限变更 updateMenu）。
    """
    user_id = get_current_user_id(request)
    client_ip = request.client.host if request.client else "unknown"
    client_queue = await sse_manager.register_client(user_id, client_ip)

    response = Response(
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        }
    )

    async def event_generator():
        message_count = 0
        try:
            yield "data: {\"event\": \"connected\"}\n\n"
            
            while True:
                if await request.is_disconnected():
                    logger.info(f"检测到SSE客户端断开连接 [uid: {user_id}]")
                    break
                
                try:
                    message = await asyncio.wait_for(client_queue.get(), timeout=settings.SSE_HEARTBEAT_INTERVAL)
                    yield message
                    message_count += 1
                except asyncio.TimeoutError:
                    # 发送心跳保持连接
                    yield ": heartbeat\n\n"
        except asyncio.CancelledError:
            logger.info(f"SSE连接已取消 [uid: {user_id}]")
            raise
        finally:
            sse_manager.unregister_client(user_id, client_queue)
            logger.info(f"SSE连接已关闭 [uid: {user_id}]，发送消息: {message_count}")

    response.body_iterator = event_generator()
    return response
