"""
菜单权限数据访问对象
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.orm import Session

from admin_console.modules.system.models.menu import SysMenu, SysRoleMenu


class MenuDao:
    """菜单数据访问对象"""

    @classmethod
    def get_all_perms(cls, db: Session) -> List[str]:
        """获取全部菜单的权限标识字段"""
        return list(db.execute(
            select(SysMenu.perms).where(SysMenu.perms.is_not(None))
        ).scalars().all())

    @classmethod
    def get_perms_by_role_ids(cls, db: Session, role_ids: List[int]) -> List[str]:
        """
        获取角色关联菜单的权限标识字段
        
        Args:
            db: 数据库会话
            role_ids: 角色ID列表
            
        Returns:
            权限标识字段列表（可能包含以逗号分隔的多个权限）
        """
        if not role_ids:
            return []
        menu_ids = select(SysRoleMenu.menu_id).where(SysRoleMenu.role_id.in_(role_ids))
        return list(db.execute(
            select(SysMenu.perms).where(SysMenu.id.in_(menu_ids), SysMenu.perms.is_not(None))
        ).scalars().all())
