"""
账号管理数据访问对象
"""
from typing import Optional, List, Iterable, Any
from sqlalchemy import select, update, delete, func, asc
from sqlalchemy.orm import Session

from admin_console.modules.system.constants import USER_STATUS_ENABLED
from admin_console.modules.system.models.user import SysUser, SysDepartment, SysRole, SysUserRole


def _exclude_and_filter(stmt, exclude_ids: Iterable[int], dept_ids: Optional[List[int]]):
    exclude_ids = [uid for uid in exclude_ids if uid is not None]
    if exclude_ids:
        stmt = stmt.where(SysUser.id.not_in(exclude_ids))
    if dept_ids:
        stmt = stmt.where(SysUser.department_id.in_(dept_ids))
    return stmt


class UserDao:
    """账号数据访问对象"""

    @classmethod
    def get_user_by_id(cls, db: Session, user_id: int) -> Optional[SysUser]:
        """
        根据账号ID获取账号
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            
        Returns:
            账号对象
        """
        return db.execute(select(SysUser).where(SysUser.id == user_id)).scalar_one_or_none()

    @classmethod
    def get_user_by_username(cls, db: Session, username: str, exclude_user_id: Optional[int] = None) -> Optional[SysUser]:
        """
        根据登录账号获取账号
        
        Args:
            db: 数据库会话
            username: 登录账号
            exclude_user_id: 排除的账号ID（用于修改时检查重名）
            
        Returns:
            账号对象
        """
        stmt = select(SysUser).where(SysUser.username == username)
        if exclude_user_id is not None:
            stmt = stmt.where(SysUser.id != exclude_user_id)
        return db.execute(stmt).scalars().first()

    @classmethod
    def get_enabled_user_by_username(cls, db: Session, username: str) -> Optional[SysUser]:
        """获取启用状态的账号"""
        return db.execute(
            select(SysUser).where(SysUser.username == username, SysUser.status == USER_STATUS_ENABLED)
        ).scalar_one_or_none()

    @classmethod
    def get_users_by_ids(cls, db: Session, user_ids: List[int]) -> List[SysUser]:
        """根据账号ID列表获取账号"""
        if not user_ids:
            return []
        return list(db.execute(
            select(SysUser).where(SysUser.id.in_(user_ids)).order_by(asc(SysUser.id))
        ).scalars().all())

    @classmethod
    def add_user(cls, db: Session, user: SysUser) -> SysUser:
        """
        新增账号，flush后返回带ID的对象
        
        Args:
            db: 数据库会话
            user: 账号对象
            
        Returns:
            账号对象
        """
        db.add(user)
        db.flush()
        return user

    @classmethod
    def update_user(cls, db: Session, user_id: int, values: dict) -> int:
        """
        更新账号字段
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            values: 待更新的字段
            
        Returns:
            受影响行数
        """
        if not values:
            return 0
        result = db.execute(update(SysUser).where(SysUser.id == user_id).values(**values))
        return result.rowcount

    @classmethod
    def delete_users(cls, db: Session, user_ids: List[int]) -> int:
        """删除账号"""
        result = db.execute(delete(SysUser).where(SysUser.id.in_(user_ids)))
        return result.rowcount

    @classmethod
    def count_users(cls, db: Session, exclude_ids: Iterable[int], dept_ids: Optional[List[int]] = None) -> int:
        """
        统计账号数量
        
        Args:
            db: 数据库会话
            exclude_ids: 排除的账号ID
            dept_ids: 部门ID过滤，为空时不过滤
            
        Returns:
            账号数量
        """
        stmt = _exclude_and_filter(select(func.count(SysUser.id)), exclude_ids, dept_ids)
        return db.execute(stmt).scalar() or 0

    @classmethod
    def page_user_ids(cls, db: Session, exclude_ids: Iterable[int], dept_ids: Optional[List[int]],
                      offset: int, limit: int) -> List[int]:
        """
        分页获取账号ID，按ID升序
        
        Args:
            db: 数据库会话
            exclude_ids: 排除的账号ID
            dept_ids: 部门ID过滤
            offset: 偏移量
            limit: 条数
            
        Returns:
            账号ID列表
        """
        stmt = _exclude_and_filter(select(SysUser.id), exclude_ids, dept_ids)
        stmt = stmt.order_by(asc(SysUser.id)).offset(offset).limit(limit)
        return list(db.execute(stmt).scalars().all())

    @classmethod
    def get_user_rows_with_dept_and_roles(cls, db: Session, user_ids: List[int]) -> List[Any]:
        """
        获取账号及其部门名称、角色名称的展开行
        
        每个账号的每个角色一行，没有角色的账号也返回一行（角色名为空）。
        
        Args:
            db: 数据库会话
            user_ids: 账号ID列表
            
        Returns:
            (SysUser, 部门名称, 角色名称) 行列表
        """
        if not user_ids:
            return []
        stmt = (
            select(SysUser, SysDepartment.name, SysRole.name)
            .outerjoin(SysDepartment, SysDepartment.id == SysUser.department_id)
            .outerjoin(SysUserRole, SysUserRole.user_id == SysUser.id)
            .outerjoin(SysRole, SysRole.id == SysUserRole.role_id)
            .where(SysUser.id.in_(user_ids))
            .order_by(asc(SysUser.id), asc(SysRole.id))
        )
        return list(db.execute(stmt).all())

    @classmethod
    def count_user_by_dept_id(cls, db: Session, dept_id: int) -> int:
        """统计部门下的账号数量"""
        return db.execute(
            select(func.count(SysUser.id)).where(SysUser.department_id == dept_id)
        ).scalar() or 0

    @classmethod
    def update_users_department(cls, db: Session, user_ids: List[int], dept_id: int) -> int:
        """批量修改账号所属部门"""
        result = db.execute(
            update(SysUser).where(SysUser.id.in_(user_ids)).values(department_id=dept_id)
        )
        return result.rowcount


class UserRoleDao:
    """账号角色关联数据访问对象"""

    @classmethod
    def get_role_ids_by_user_id(cls, db: Session, user_id: int) -> List[int]:
        """获取账号的角色ID列表"""
        return list(db.execute(
            select(SysUserRole.role_id).where(SysUserRole.user_id == user_id).order_by(asc(SysUserRole.role_id))
        ).scalars().all())

    @classmethod
    def get_user_ids_by_role_ids(cls, db: Session, role_ids: List[int]) -> List[int]:
        """获取拥有指定角色的账号ID（去重）"""
        if not role_ids:
            return []
        return list(db.execute(
            select(SysUserRole.user_id).where(SysUserRole.role_id.in_(role_ids)).distinct()
        ).scalars().all())

    @classmethod
    def count_by_role_ids(cls, db: Session, role_ids: List[int]) -> int:
        """统计角色关联的账号行数"""
        if not role_ids:
            return 0
        return db.execute(
            select(func.count(SysUserRole.id)).where(SysUserRole.role_id.in_(role_ids))
        ).scalar() or 0

    @classmethod
    def add_user_roles(cls, db: Session, user_id: int, role_ids: List[int]) -> None:
        """新增账号角色关联"""
        for role_id in dict.fromkeys(role_ids):
            db.add(SysUserRole(user_id=user_id, role_id=role_id))
        db.flush()

    @classmethod
    def delete_by_user_ids(cls, db: Session, user_ids: List[int]) -> int:
        """删除账号的全部角色关联"""
        result = db.execute(delete(SysUserRole).where(SysUserRole.user_id.in_(user_ids)))
        return result.rowcount

    @classmethod
    def delete_by_role_ids(cls, db: Session, role_ids: List[int]) -> int:
        """删除角色的全部账号关联"""
        result = db.execute(delete(SysUserRole).where(SysUserRole.role_id.in_(role_ids)))
        return result.rowcount
