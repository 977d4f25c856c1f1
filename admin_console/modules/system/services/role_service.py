"""
角色管理服务层
"""
import logging
from typing import List, Tuple, Iterable, Callable, Any
from sqlalchemy.orm import Session

from admin_console.core.config import settings
from admin_console.core.exceptions import ApiException, ErrorCode
from admin_console.modules.system.dao.role_dao import RoleDao
from admin_console.modules.system.dao.user_dao import UserRoleDao
from admin_console.modules.system.models.user import SysRole
from admin_console.modules.system.schemas.common import PageOptionsModel, PageResultModel, PaginationModel
from admin_console.modules.system.schemas.role import (
    CreateRoleModel, UpdateRoleModel, RoleModel, RoleInfoModel
)
from admin_console.modules.system.services.menu_service import MenuService

logger = logging.getLogger(__name__)


def diff_association(rows: Iterable[Any], target_ids: Iterable[int],
                     get_id: Callable[[Any], int]) -> Tuple[List[int], List[int]]:
    """
    计算关联表从当前行变为目标集合所需的增删
    
    Args:
        rows: 当前关联行（带主键 id）
        target_ids: 目标关联ID集合
        get_id: 从关联行取出关联ID的函数
        
    Returns:
        (需要新增的关联ID, 需要删除的关联行主键)；
        不在目标集合中的行以及重复的行都会被删除
    """
    targets = list(dict.fromkeys(target_ids))
    target_set = set(targets)
    kept = set()
    delete_row_ids = []
    for row in rows:
        related_id = get_id(row)
        if related_id in target_set and related_id not in kept:
            kept.add(related_id)
        else:
            delete_row_ids.append(row.id)
    insert_ids = [related_id for related_id in targets if related_id not in kept]
    return insert_ids, delete_row_ids


class RoleService:
    """
    角色管理模块服务层
    """

    @classmethod
    def get_role_list(cls, db: Session) -> List[RoleModel]:
        """获取除超级管理员外的全部角色"""
        return [RoleModel.model_validate(role) for role in RoleDao.get_role_list(db, settings.ROOT_ROLE_ID)]

    @classmethod
    def count_roles(cls, db: Session) -> int:
        """统计除超级管理员外的角色数量"""
        return RoleDao.count_roles(db, settings.ROOT_ROLE_ID)

    @classmethod
    def page_roles(cls, db: Session, query: PageOptionsModel) -> PageResultModel[RoleModel]:
        """
        分页获取角色，不含超级管理员角色
        
        Args:
            db: 数据库会话
            query: 分页参数
            
        Returns:
            分页结果
        """
        roles = RoleDao.page_roles(db, settings.ROOT_ROLE_ID, query.offset, query.limit)
        return PageResultModel[RoleModel](
            items=[RoleModel.model_validate(role) for role in roles],
            pagination=PaginationModel(total=cls.count_roles(db), page=query.page, size=query.limit)
        )

    @classmethod
    def get_role_info(cls, db: Session, role_id: int) -> RoleInfoModel:
        """
        获取角色详情及其关联的菜单、部门
        
        Args:
            db: 数据库会话
            role_id: 角色ID
            
        Returns:
            角色详情
        """
        role = RoleDao.get_role_by_id(db, role_id)
        if not role:
            raise ApiException(ErrorCode.ROLE_NOT_FOUND)
        return RoleInfoModel(
            role_info=RoleModel.model_validate(role),
            menus=RoleDao.get_role_menu_ids(db, role_id),
            depts=RoleDao.get_role_dept_ids(db, role_id)
        )

    @classmethod
    def add_role(cls, db: Session, role_data: CreateRoleModel, user_id: int) -> SysRole:
        """
        新增角色及其菜单、部门关联
        
        Args:
            db: 数据库会话
            role_data: 角色数据
            user_id: 创建者账号ID
            
        Returns:
            新建的角色
        """
        if RoleDao.get_role_by_name_or_label(db, role_data.name, role_data.label):
            raise ApiException(ErrorCode.ROLE_EXISTS)
        
        try:
            role = RoleDao.add_role(db, SysRole(
                user_id=str(user_id),
                name=role_data.name,
                label=role_data.label,
                remark=role_data.remark
            ))
            RoleDao.add_role_menus(db, role.id, list(dict.fromkeys(role_data.menus)))
            RoleDao.add_role_depts(db, role.id, list(dict.fromkeys(role_data.depts)))
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"账号 {user_id} 新增角色 {role.name} (ID: {role.id})")
        return role

    @classmethod
    def update_role(cls, db: Session, role_data: UpdateRoleModel) -> bool:
        """
        修改角色，按差集增删菜单与部门关联
        
        菜单关联有变化时，通知拥有该角色的账号刷新菜单。
        
        Args:
            db: 数据库会话
            role_data: 角色数据
            
        Returns:
            菜单关联是否有变化
        """
        role_id = role_data.role_id
        if not RoleDao.get_role_by_id(db, role_id):
            raise ApiException(ErrorCode.ROLE_NOT_FOUND)
        if RoleDao.get_role_by_name_or_label(db, role_data.name, role_data.label, exclude_role_id=role_id):
            raise ApiException(ErrorCode.ROLE_EXISTS)
        
        menu_inserts, menu_deletes = diff_association(
            RoleDao.get_role_menu_rows(db, role_id), role_data.menus, lambda row: row.menu_id
        )
        dept_inserts, dept_deletes = diff_association(
            RoleDao.get_role_dept_rows(db, role_id), role_data.depts, lambda row: row.department_id
        )
        
        try:
            RoleDao.update_role(db, role_id, {
                "name": role_data.name,
                "label": role_data.label,
                "remark": role_data.remark
            })
            RoleDao.add_role_menus(db, role_id, menu_inserts)
            RoleDao.delete_role_menus_by_ids(db, menu_deletes)
            RoleDao.add_role_depts(db, role_id, dept_inserts)
            RoleDao.delete_role_depts_by_ids(db, dept_deletes)
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        menus_changed = bool(menu_inserts or menu_deletes)
        logger.info(
            f"修改角色 {role_id}: 菜单 +{len(menu_inserts)}/-{len(menu_deletes)}，"
            f"部门 +{len(dept_inserts)}/-{len(dept_deletes)}"
        )
        if menus_changed:
            MenuService.notice_user_to_update_menus_by_role_ids(db, [role_id])
        return menus_changed

    @classmethod
    def delete_roles(cls, db: Session, role_ids: List[int]) -> None:
        """
        删除角色及其菜单、部门、账号关联，不允许删除超级管理员角色
        
        Args:
            db: 数据库会话
            role_ids: 角色ID列表
        """
        if settings.ROOT_ROLE_ID in role_ids:
            raise ApiException(ErrorCode.BUILT_IN_RESOURCE)
        try:
            RoleDao.delete_roles(db, role_ids)
            RoleDao.delete_role_menus_by_role_ids(db, role_ids)
            RoleDao.delete_role_depts_by_role_ids(db, role_ids)
            UserRoleDao.delete_by_role_ids(db, role_ids)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"删除角色: {role_ids}")

    @classmethod
    def get_role_id_by_user(cls, db: Session, user_id: int) -> List[int]:
        """获取账号的角色ID列表"""
        return UserRoleDao.get_role_ids_by_user_id(db, user_id)

    @classmethod
    def count_user_id_by_role(cls, db: Session, role_ids: List[int]) -> int:
        """
        统计角色关联的账号数量，不允许查询超级管理员角色
        
        Args:
            db: 数据库会话
            role_ids: 角色ID列表
            
        Returns:
            账号角色关联行数
        """
        if settings.ROOT_ROLE_ID in role_ids:
            raise ApiException(ErrorCode.BUILT_IN_RESOURCE)
        return UserRoleDao.count_by_role_ids(db, role_ids)
