"""
角色管理数据访问对象
"""
from typing import Optional, List
from sqlalchemy import select, update, delete, func, asc, or_
from sqlalchemy.orm import Session

from admin_console.modules.system.models.user import SysRole
from admin_console.modules.system.models.menu import SysRoleMenu, SysRoleDepartment


class RoleDao:
    """角色数据访问对象"""

    @classmethod
    def get_role_by_id(cls, db: Session, role_id: int) -> Optional[SysRole]:
        """
        根据角色ID获取角色信息
        
        Args:
            db: 数据库会话
            role_id: 角色ID
            
        Returns:
            角色信息对象
        """
        return db.execute(select(SysRole).where(SysRole.id == role_id)).scalar_one_or_none()

    @classmethod
    def get_role_by_name_or_label(cls, db: Session, name: str, label: str, exclude_role_id: Optional[int] = None) -> Optional[SysRole]:
        """获取名称或标识相同的角色（用于新增、修改时检查重复）"""
        stmt = select(SysRole).where(or_(SysRole.name == name, SysRole.label == label))
        if exclude_role_id is not None:
            stmt = stmt.where(SysRole.id != exclude_role_id)
        return db.execute(stmt).scalars().first()

    @classmethod
    def get_role_list(cls, db: Session, exclude_role_id: int) -> List[SysRole]:
        """获取除指定角色外的全部角色"""
        return list(db.execute(
            select(SysRole).where(SysRole.id != exclude_role_id).order_by(asc(SysRole.id))
        ).scalars().all())

    @classmethod
    def count_roles(cls, db: Session, exclude_role_id: int) -> int:
        """统计除指定角色外的角色数量"""
        return db.execute(
            select(func.count(SysRole.id)).where(SysRole.id != exclude_role_id)
        ).scalar() or 0

    @classmethod
    def page_roles(cls, db: Session, exclude_role_id: int, offset: int, limit: int) -> List[SysRole]:
        """
        分页获取角色，按ID升序
        
        Args:
            db: 数据库会话
            exclude_role_id: 排除的角色ID
            offset: 偏移量
            limit: 条数
            
        Returns:
            角色列表
        """
        return list(db.execute(
            select(SysRole)
            .where(SysRole.id != exclude_role_id)
            .order_by(asc(SysRole.id))
            .offset(offset)
            .limit(limit)
        ).scalars().all())

    @classmethod
    def add_role(cls, db: Session, role: SysRole) -> SysRole:
        """新增角色"""
        db.add(role)
        db.flush()
        return role

    @classmethod
    def update_role(cls, db: Session, role_id: int, values: dict) -> int:
        """更新角色字段"""
        result = db.execute(update(SysRole).where(SysRole.id == role_id).values(**values))
        return result.rowcount

    @classmethod
    def delete_roles(cls, db: Session, role_ids: List[int]) -> int:
        """删除角色"""
        result = db.execute(delete(SysRole).where(SysRole.id.in_(role_ids)))
        return result.rowcount

    # ==================== 角色菜单关联 ====================

    @classmethod
    def get_role_menu_rows(cls, db: Session, role_id: int) -> List[SysRoleMenu]:
        """获取角色的菜单关联行"""
        return list(db.execute(
            select(SysRoleMenu).where(SysRoleMenu.role_id == role_id).order_by(asc(SysRoleMenu.id))
        ).scalars().all())

    @classmethod
    def get_role_menu_ids(cls, db: Session, role_id: int) -> List[int]:
        """获取角色的菜单ID列表"""
        return [row.menu_id for row in cls.get_role_menu_rows(db, role_id)]

    @classmethod
    def add_role_menus(cls, db: Session, role_id: int, menu_ids: List[int]) -> None:
        """新增角色菜单关联"""
        for menu_id in menu_ids:
            db.add(SysRoleMenu(role_id=role_id, menu_id=menu_id))
        db.flush()

    @classmethod
    def delete_role_menus_by_ids(cls, db: Session, row_ids: List[int]) -> int:
        """按关联行ID删除角色菜单关联"""
        if not row_ids:
            return 0
        result = db.execute(delete(SysRoleMenu).where(SysRoleMenu.id.in_(row_ids)))
        return result.rowcount

    @classmethod
    def delete_role_menus_by_role_ids(cls, db: Session, role_ids: List[int]) -> int:
        """删除角色的全部菜单关联"""
        result = db.execute(delete(SysRoleMenu).where(SysRoleMenu.role_id.in_(role_ids)))
        return result.rowcount

    # ==================== 角色部门关联 ====================

    @classmethod
    def get_role_dept_rows(cls, db: Session, role_id: int) -> List[SysRoleDepartment]:
        """获取角色的部门关联行"""
        return list(db.execute(
            select(SysRoleDepartment).where(SysRoleDepartment.role_id == role_id).order_by(asc(SysRoleDepartment.id))
        ).scalars().all())

    @classmethod
    def get_role_dept_ids(cls, db: Session, role_id: int) -> List[int]:
        """获取角色的部门ID列表"""
        return [row.department_id for row in cls.get_role_dept_rows(db, role_id)]

    @classmethod
    def add_role_depts(cls, db: Session, role_id: int, dept_ids: List[int]) -> None:
        """新增角色部门关联"""
        for dept_id in dept_ids:
            db.add(SysRoleDepartment(role_id=role_id, department_id=dept_id))
        db.flush()

    @classmethod
    def delete_role_depts_by_ids(cls, db: Session, row_ids: List[int]) -> int:
        """按关联行ID删除角色部门关联"""
        if not row_ids:
            return 0
        result = db.execute(delete(SysRoleDepartment).where(SysRoleDepartment.id.in_(row_ids)))
        return result.rowcount

    @classmethod
    def delete_role_depts_by_role_ids(cls, db: Session, role_ids: List[int]) -> int:
        """删除角色的全部部门关联"""
        result = db.execute(delete(SysRoleDepartment).where(SysRoleDepartment.role_id.in_(role_ids)))
        return result.rowcount
