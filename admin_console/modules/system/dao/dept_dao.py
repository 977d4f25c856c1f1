"""
部门管理数据访问对象
"""
from typing import Optional, List
from sqlalchemy import select, update, delete, func, asc, desc
from sqlalchemy.orm import Session

from admin_console.modules.system.models.user import SysDepartment
from admin_console.modules.system.models.menu import SysRoleDepartment


class DeptDao:
    """部门数据访问对象"""

    @classmethod
    def get_dept_by_id(cls, db: Session, dept_id: int) -> Optional[SysDepartment]:
        """
        根据部门ID获取部门
        
        Args:
            db: 数据库会话
            dept_id: 部门ID
            
        Returns:
            部门对象
        """
        return db.execute(select(SysDepartment).where(SysDepartment.id == dept_id)).scalar_one_or_none()

    @classmethod
    def get_dept_list(cls, db: Session) -> List[SysDepartment]:
        """获取全部部门，按排序号降序"""
        return list(db.execute(
            select(SysDepartment).order_by(desc(SysDepartment.order_num), asc(SysDepartment.id))
        ).scalars().all())

    @classmethod
    def get_dept_list_by_role_ids(cls, db: Session, role_ids: List[int]) -> List[SysDepartment]:
        """
        获取角色关联的部门（去重），按排序号升序
        
        Args:
            db: 数据库会话
            role_ids: 角色ID列表
            
        Returns:
            部门列表
        """
        if not role_ids:
            return []
        dept_ids = select(SysRoleDepartment.department_id).where(SysRoleDepartment.role_id.in_(role_ids))
        return list(db.execute(
            select(SysDepartment)
            .where(SysDepartment.id.in_(dept_ids))
            .order_by(asc(SysDepartment.order_num), asc(SysDepartment.id))
        ).scalars().all())

    @classmethod
    def get_all_dept_ordered(cls, db: Session) -> List[SysDepartment]:
        """获取全部部门，按排序号升序"""
        return list(db.execute(
            select(SysDepartment).order_by(asc(SysDepartment.order_num), asc(SysDepartment.id))
        ).scalars().all())

    @classmethod
    def add_dept(cls, db: Session, dept: SysDepartment) -> SysDepartment:
        """新增部门"""
        db.add(dept)
        db.flush()
        return dept

    @classmethod
    def update_dept(cls, db: Session, dept_id: int, values: dict) -> int:
        """更新部门字段"""
        result = db.execute(update(SysDepartment).where(SysDepartment.id == dept_id).values(**values))
        return result.rowcount

    @classmethod
    def delete_dept(cls, db: Session, dept_id: int) -> int:
        """删除部门"""
        result = db.execute(delete(SysDepartment).where(SysDepartment.id == dept_id))
        return result.rowcount

    @classmethod
    def count_child_dept(cls, db: Session, dept_id: int) -> int:
        """统计子部门数量"""
        return db.execute(
            select(func.count(SysDepartment.id)).where(SysDepartment.parent_id == dept_id)
        ).scalar() or 0

    @classmethod
    def count_role_by_dept_id(cls, db: Session, dept_id: int) -> int:
        """统计关联该部门的角色数量"""
        return db.execute(
            select(func.count(SysRoleDepartment.id)).where(SysRoleDepartment.department_id == dept_id)
        ).scalar() or 0

    @classmethod
    def count_existing(cls, db: Session, dept_ids: List[int]) -> int:
        """统计存在的部门数量"""
        if not dept_ids:
            return 0
        return db.execute(
            select(func.count(SysDepartment.id)).where(SysDepartment.id.in_(set(dept_ids)))
        ).scalar() or 0
