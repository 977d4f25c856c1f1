"""
部门管理服务层
"""
import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from admin_console.core.config import settings
from admin_console.core.exceptions import ApiException, ErrorCode
from admin_console.modules.system.constants import ROOT_PARENT_ID
from admin_console.modules.system.dao.dept_dao import DeptDao
from admin_console.modules.system.dao.user_dao import UserDao, UserRoleDao
from admin_console.modules.system.models.user import SysDepartment
from admin_console.modules.system.schemas.dept import (
    CreateDeptModel, UpdateDeptModel, MoveDeptItemModel, DeptModel, DeptInfoModel
)

logger = logging.getLogger(__name__)


class DeptService:
    """
    部门管理模块服务层
    """

    @classmethod
    def get_dept_list(cls, db: Session) -> List[DeptModel]:
        """获取全部部门"""
        return [DeptModel.model_validate(dept) for dept in DeptDao.get_dept_list(db)]

    @classmethod
    def get_depts(cls, db: Session, user_id: int) -> List[DeptModel]:
        """
        获取账号可见的部门
        
        超级管理员角色可见全部部门，其他账号可见其角色关联的部门。
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            
        Returns:
            部门列表
        """
        role_ids = UserRoleDao.get_role_ids_by_user_id(db, user_id)
        if settings.ROOT_ROLE_ID in role_ids:
            depts = DeptDao.get_all_dept_ordered(db)
        else:
            depts = DeptDao.get_dept_list_by_role_ids(db, role_ids)
        return [DeptModel.model_validate(dept) for dept in depts]

    @classmethod
    def get_dept_info(cls, db: Session, dept_id: int) -> DeptInfoModel:
        """
        获取部门详情及其上级部门
        
        Args:
            db: 数据库会话
            dept_id: 部门ID
            
        Returns:
            部门详情
        """
        dept = DeptDao.get_dept_by_id(db, dept_id)
        if not dept:
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        
        parent = None
        if dept.parent_id is not None:
            parent_dept = DeptDao.get_dept_by_id(db, dept.parent_id)
            if parent_dept:
                parent = DeptModel.model_validate(parent_dept)
        return DeptInfoModel(department=DeptModel.model_validate(dept), parent_department=parent)

    @classmethod
    def add_dept(cls, db: Session, dept_data: CreateDeptModel) -> SysDepartment:
        """
        新增部门，上级部门ID为-1时作为根部门
        
        Args:
            db: 数据库会话
            dept_data: 部门数据
            
        Returns:
            新建的部门
        """
        parent_id = None if dept_data.parent_id == ROOT_PARENT_ID else dept_data.parent_id
        if parent_id is not None and not DeptDao.get_dept_by_id(db, parent_id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        
        try:
            dept = DeptDao.add_dept(db, SysDepartment(
                name=dept_data.name,
                parent_id=parent_id,
                order_num=dept_data.order_num
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"新增部门 {dept.name} (ID: {dept.id})，上级部门: {parent_id}")
        return dept

    @classmethod
    def update_dept(cls, db: Session, dept_data: UpdateDeptModel) -> None:
        """
        修改部门，上级部门ID为-1时保持原上级部门不变
        
        Args:
            db: 数据库会话
            dept_data: 部门数据
        """
        if not DeptDao.get_dept_by_id(db, dept_data.id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        
        values = {"name": dept_data.name, "order_num": dept_data.order_num}
        if dept_data.parent_id != ROOT_PARENT_ID:
            if not DeptDao.get_dept_by_id(db, dept_data.parent_id):
                raise ApiException(ErrorCode.DEPT_NOT_FOUND)
            values["parent_id"] = dept_data.parent_id
            cls._check_parent_changes(db, {dept_data.id: dept_data.parent_id})
        
        try:
            DeptDao.update_dept(db, dept_data.id, values)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"修改部门 {dept_data.id}: {values}")

    @classmethod
    def transfer(cls, db: Session, user_ids: List[int], dept_id: int) -> None:
        """
        将账号转移到指定部门
        
        Args:
            db: 数据库会话
            user_ids: 账号ID列表
            dept_id: 目标部门ID
        """
        if not DeptDao.get_dept_by_id(db, dept_id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        try:
            UserDao.update_users_department(db, user_ids, dept_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"账号 {user_ids} 已转移到部门 {dept_id}")

    @classmethod
    def move(cls, db: Session, depts: List[MoveDeptItemModel]) -> None:
        """
        批量调整部门的上级部门，在同一事务中完成
        
        Args:
            db: 数据库会话
            depts: 部门ID与新的上级部门ID
        """
        referenced = {item.id for item in depts} | {item.parent_id for item in depts if item.parent_id is not None}
        if DeptDao.count_existing(db, list(referenced)) != len(referenced):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        cls._check_parent_changes(db, {item.id: item.parent_id for item in depts})
        
        try:
            for item in depts:
                DeptDao.update_dept(db, item.id, {"parent_id": item.parent_id})
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"移动部门: {[(item.id, item.parent_id) for item in depts]}")

    @classmethod
    def delete_dept(cls, db: Session, dept_id: int) -> None:
        """
        删除部门
        
        依次检查部门下的账号(10009)、关联角色(10010)、子部门(10015)，
        任一存在则不删除。
        
        Args:
            db: 数据库会话
            dept_id: 部门ID
        """
        if not DeptDao.get_dept_by_id(db, dept_id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        if cls.count_user_by_dept_id(db, dept_id) > 0:
            raise ApiException(ErrorCode.DEPT_HAS_USERS)
        if cls.count_role_by_dept_id(db, dept_id) > 0:
            raise ApiException(ErrorCode.DEPT_HAS_ROLES)
        if cls.count_child_dept(db, dept_id) > 0:
            raise ApiException(ErrorCode.DEPT_HAS_CHILDREN)
        
        try:
            DeptDao.delete_dept(db, dept_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"删除部门 {dept_id}")

    @classmethod
    def count_user_by_dept_id(cls, db: Session, dept_id: int) -> int:
        """统计部门下的账号数量"""
        return UserDao.count_user_by_dept_id(db, dept_id)

    @classmethod
    def count_role_by_dept_id(cls, db: Session, dept_id: int) -> int:
        """统计关联该部门的角色数量"""
        return DeptDao.count_role_by_dept_id(db, dept_id)

    @classmethod
    def count_child_dept(cls, db: Session, dept_id: int) -> int:
        """统计子部门数量"""
        return DeptDao.count_child_dept(db, dept_id)

    @classmethod
    def _check_parent_changes(cls, db: Session, changes: Dict[int, Optional[int]]) -> None:
        """
        校验调整上级部门后部门树不出现环
        
        部门不能挂到自身或其下级部门之下，否则抛出10025。
        
        Args:
            db: 数据库会话
            changes: 部门ID到新上级部门ID的映射，None表示根部门
        """
        parents = {dept.id: dept.parent_id for dept in DeptDao.get_all_dept_ordered(db)}
        parents.update(changes)
        for dept_id in changes:
            visited = {dept_id}
            parent_id = parents.get(dept_id)
            while parent_id is not None:
                if parent_id in visited:
                    raise ApiException(ErrorCode.DEPT_PARENT_INVALID)
                visited.add(parent_id)
                parent_id = parents.get(parent_id)
