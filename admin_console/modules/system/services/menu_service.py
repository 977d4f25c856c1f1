"""
菜单权限服务层
"""
import json
import logging
from typing import List
from sqlalchemy.orm import Session

from admin_console.core.config import settings
from admin_console.modules.system.constants import AdminCacheKey
from admin_console.modules.system.dao.menu_dao import MenuDao
from admin_console.modules.system.dao.user_dao import UserRoleDao
from admin_console.modules.system.utils.auth_util import JWTUtil
from admin_console.services.redis_client import redis_client
from admin_console.services.sse_connection_manager import sse_manager

logger = logging.getLogger(__name__)


class MenuService:
    """
    菜单权限模块服务层
    """

    @classmethod
    def get_perms(cls, db: Session, user_id: int) -> List[str]:
        """
        获取账号的权限标识列表
        
        超级管理员角色拥有全部菜单的权限；菜单的 perms 字段以逗号分隔多个权限。
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            
        Returns:
            去重后的权限标识列表
        """
        role_ids = UserRoleDao.get_role_ids_by_user_id(db, user_id)
        if settings.ROOT_ROLE_ID in role_ids:
            raw_perms = MenuDao.get_all_perms(db)
        else:
            raw_perms = MenuDao.get_perms_by_role_ids(db, role_ids)
        
        perms = []
        for item in raw_perms:
            perms.extend(perm.strip() for perm in item.split(",") if perm.strip())
        return list(dict.fromkeys(perms))

    @classmethod
    def refresh_perms(cls, db: Session, user_id: int) -> bool:
        """
        刷新在线账号的权限缓存，并通知其刷新菜单
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            
        Returns:
            账号在线并已刷新时返回True
        """
        if not redis_client.exists(AdminCacheKey.token(user_id)):
            return False
        perms = cls.get_perms(db, user_id)
        redis_client.set(AdminCacheKey.perms(user_id), json.dumps(perms), ex=JWTUtil.get_token_expire_time())
        sse_manager.notice_user_to_update_menus_by_user_ids([user_id])
        logger.info(f"已刷新账号 {user_id} 的权限缓存，共 {len(perms)} 项")
        return True

    @classmethod
    def refresh_online_user_perms(cls, db: Session) -> int:
        """
        刷新所有在线账号的权限缓存
        
        Returns:
            刷新的账号数量
        """
        count = 0
        for key in redis_client.scan_keys(AdminCacheKey.token_pattern()):
            try:
                user_id = int(key.rsplit(":", 1)[1])
            except ValueError:
                logger.warning(f"忽略无法解析的令牌缓存键: {key}")
                continue
            if cls.refresh_perms(db, user_id):
                count += 1
        return count

    @classmethod
    def notice_user_to_update_menus_by_role_ids(cls, db: Session, role_ids: List[int]) -> int:
        """
        通知拥有指定角色的账号刷新菜单
        
        Args:
            db: 数据库会话
            role_ids: 角色ID列表
            
        Returns:
            投递的连接数
        """
        user_ids = UserRoleDao.get_user_ids_by_role_ids(db, role_ids)
        return sse_manager.notice_user_to_update_menus_by_user_ids(user_ids)
