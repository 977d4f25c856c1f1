"""
SSE连接管理服务

按账号维护SSE客户端队列，向指定账号推送事件（如菜单权限变更）。
同步的请求处理函数运行在线程池中，推送时通过 call_soon_threadsafe
把消息投递回事件循环。
"""

import asyncio
import json
import logging
import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Any

from admin_console.core.config import settings
from admin_console.modules.system.constants import EVENT_UPDATE_MENU

logger = logging.getLogger(__name__)


class SSEConnectionManager:
    """SSE连接管理器"""
    
    def __init__(self):
        self.user_clients: Dict[int, Set[asyncio.Queue]] = {}
        self.max_queue_size = settings.SSE_MAX_QUEUE_SIZE
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()
    
    async def register_client(self, uid: int, client_ip: str = "unknown") -> asyncio.Queue:
        """注册账号的SSE客户端"""
        self._loop = asyncio.get_running_loop()
        client_queue = asyncio.Queue(maxsize=self.max_queue_size)
        client_queue._client_ip = client_ip
        client_queue._connection_time = datetime.now()
        
        with self._lock:
            self.user_clients.setdefault(uid, set()).add(client_queue)
            count = len(self.user_clients[uid])
        
        logger.info(f"🔗 SSE客户端已连接 [uid: {uid}, ip: {client_ip}]，该账号连接数: {count}")
        return client_queue
    
    def unregister_client(self, uid: int, client_queue: asyncio.Queue) -> None:
        """注销SSE客户端"""
        with self._lock:
            queues = self.user_clients.get(uid)
            if not queues or client_queue not in queues:
                return
            queues.discard(client_queue)
            if not queues:
                del self.user_clients[uid]
        
        duration = datetime.now() - client_queue._connection_time
        logger.info(f"🔌 SSE客户端已断开 [uid: {uid}]，连接时长: {duration.total_seconds():.1f}秒")
    
    def online_user_ids(self) -> List[int]:
        """当前有SSE连接的账号ID"""
        with self._lock:
            return list(self.user_clients.keys())
    
    def send_to_users(self, uids: Iterable[int], event: str, data: Optional[Dict[str, Any]] = None) -> int:
        """
        向指定账号的所有连接推送事件
        
        Args:
            uids: 账号ID列表
            event: 事件名
            data: 事件数据
            
        Returns:
            投递的连接数
        """
        message = f"event: {event}\ndata: {json.dumps(data or {}, ensure_ascii=False)}\n\n"
        
        with self._lock:
            targets = [queue for uid in set(uids) for queue in self.user_clients.get(uid, ())]
        
        for client_queue in targets:
            self._put(client_queue, message)
        
        if targets:
            logger.info(f"📢 推送事件 {event} 到 {len(targets)} 个连接")
        return len(targets)
    
    def notice_user_to_update_menus_by_user_ids(self, uids: Iterable[int]) -> int:
        """通知账号刷新菜单"""
        return self.send_to_users(uids, EVENT_UPDATE_MENU)
    
    def _put(self, client_queue: asyncio.Queue, message: str) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._offer(client_queue, message)
        else:
            loop.call_soon_threadsafe(self._offer, client_queue, message)
    
    @staticmethod
    def _offer(client_queue: asyncio.Queue, message: str) -> None:
        try:
            client_queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"⚠️ SSE客户端队列已满，丢弃消息 [ip: {getattr(client_queue, '_client_ip', 'unknown')}]")


# 创建全局SSE连接管理器实例
sse_manager = SSEConnectionManager()
