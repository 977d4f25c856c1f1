"""
系统管理模块常量
"""
from admin_console.core.config import settings


class AdminCacheKey:
    """管理端Redis缓存键"""

    @staticmethod
    def password_version(uid: int) -> str:
        return f"{settings.ADMIN_CACHE_PREFIX}:passwordVersion:{uid}"

    @staticmethod
    def token(uid: int) -> str:
        return f"{settings.ADMIN_CACHE_PREFIX}:token:{uid}"

    @staticmethod
    def perms(uid: int) -> str:
        return f"{settings.ADMIN_CACHE_PREFIX}:perms:{uid}"

    @staticmethod
    def token_pattern() -> str:
        return f"{settings.ADMIN_CACHE_PREFIX}:token:*"

    @classmethod
    def user_keys(cls, uid: int) -> list:
        """账号的全部会话缓存键"""
        return [cls.password_version(uid), cls.token(uid), cls.perms(uid)]


# 账号状态
USER_STATUS_DISABLED = 0
USER_STATUS_ENABLED = 1

# 新增/修改部门时表示"根部门"的上级ID
ROOT_PARENT_ID = -1

# 推送给前端的事件
EVENT_UPDATE_MENU = "updateMenu"
