"""
Redis客户端服务
提供统一的Redis连接管理和操作接口
"""
import logging
import redis
from typing import Optional, Any, List
from admin_console.core.config import settings

logger = logging.getLogger(__name__)

INCR_IF_EXISTS_SCRIPT = """
if redis.call("EXISTS", KEYS[1]) == 1 then
    return redis.call("INCR", KEYS[1])
end
return 0
"""


class RedisClient:
    """Redis客户端封装类"""
    
    def __init__(self):
        self.client: Optional[redis.Redis] = None
        self.is_connected = False
        self.logger = logging.getLogger(__name__)
    
    def connect(self) -> bool:
        """连接Redis服务器"""
        try:
            self.client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
            
            # 测试连接
            self.client.ping()
            self.is_connected = True
            
            self.logger.info(f"Redis连接成功: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
            return True
            
        except redis.RedisError as e:
            self.logger.error(f"Redis连接失败: {str(e)}")
            self.is_connected = False
            return False
    
    def disconnect(self):
        """断开Redis连接"""
        try:
            if self.client:
                self.client.close()
                self.is_connected = False
                self.logger.info("Redis连接已断开")
        except redis.RedisError as e:
            self.logger.error(f"断开Redis连接失败: {str(e)}")
    
    def ping(self) -> bool:
        """检查Redis连接状态"""
        try:
            if not self.client:
                return False
            self.client.ping()
            return True
        except redis.RedisError:
            self.is_connected = False
            return False
    
    def ensure_connected(self) -> bool:
        """确保Redis连接可用"""
        if not self.is_connected or not self.ping():
            return self.connect()
        return True
    
    # ==================== 基础操作 ====================
    
    def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        """设置键值"""
        try:
            if not self.ensure_connected():
                return False
            self.client.set(key, value, ex=ex)
            return True
        except redis.RedisError as e:
            self.logger.error(f"Redis SET操作失败: {str(e)}")
            return False
    
    def get(self, key: str) -> Optional[str]:
        """获取键值"""
        try:
            if not self.ensure_connected():
                return None
            return self.client.get(key)
        except redis.RedisError as e:
            self.logger.error(f"Redis GET操作失败: {str(e)}")
            return None
    
    def delete(self, *keys: str) -> int:
        """删除键"""
        if not keys:
            return 0
        try:
            if not self.ensure_connected():
                return 0
            return self.client.delete(*keys)
        except redis.RedisError as e:
            self.logger.error(f"Redis DELETE操作失败: {str(e)}")
            return 0
    
    def exists(self, key: str) -> bool:
        """检查键是否存在"""
        try:
            if not self.ensure_connected():
                return False
            return self.client.exists(key) > 0
        except redis.RedisError as e:
            self.logger.error(f"Redis EXISTS操作失败: {str(e)}")
            return False
    
    def incr_if_exists(self, key: str) -> Optional[int]:
        """
        键存在时原子自增1
        
        Returns:
            自增后的值；键不存在时为0；Redis不可用时为None
        """
        try:
            if not self.ensure_connected():
                return None
            return int(self.client.eval(INCR_IF_EXISTS_SCRIPT, 1, key))
        except redis.RedisError as e:
            self.logger.error(f"Redis INCR操作失败: {str(e)}")
            return None
    
    def scan_keys(self, pattern: str) -> List[str]:
        """按模式扫描键"""
        try:
            if not self.ensure_connected():
                return []
            return list(self.client.scan_iter(match=pattern))
        except redis.RedisError as e:
            self.logger.error(f"Redis SCAN操作失败: {str(e)}")
            return []
    
# 创建全局Redis客户端实例
redis_client = RedisClient()

def init_redis() -> bool:
    """初始化Redis连接"""
    return redis_client.connect()

def close_redis():
    """关闭Redis连接"""
    redis_client.disconnect()
