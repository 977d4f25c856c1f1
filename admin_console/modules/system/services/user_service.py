"""
账号管理服务层
"""
import logging
from typing import List, Optional, Dict, Iterable, Tuple
from sqlalchemy.orm import Session

from admin_console.core.config import settings
from admin_console.core.exceptions import ApiException, ErrorCode
from admin_console.modules.system.constants import AdminCacheKey, USER_STATUS_DISABLED
from admin_console.modules.system.dao.dept_dao import DeptDao
from admin_console.modules.system.dao.user_dao import UserDao, UserRoleDao
from admin_console.modules.system.models.user import SysUser
from admin_console.modules.system.schemas.common import PageResultModel, PaginationModel
from admin_console.modules.system.schemas.user import (
    CreateUserModel, UpdateUserModel, PageSearchUserModel, UpdatePasswordModel,
    UpdatePersonInfoModel, UserBaseModel, UserDetailModel, UserPageItemModel, AccountInfoModel
)
from admin_console.modules.system.utils.auth_util import PasswordUtil
from admin_console.services.redis_client import redis_client

logger = logging.getLogger(__name__)


def fold_user_rows(rows: Iterable[Tuple[SysUser, Optional[str], Optional[str]]]) -> List[UserPageItemModel]:
    """
    将 (账号, 部门名称, 角色名称) 展开行按账号合并为一条记录
    
    Args:
        rows: 按账号排列的展开行，同一账号的行可以不相邻
        
    Returns:
        按账号首次出现顺序排列的记录，角色名称收集到 role_names
    """
    records: Dict[int, UserPageItemModel] = {}
    for user, dept_name, role_name in rows:
        record = records.get(user.id)
        if record is None:
            record = UserPageItemModel.model_validate(user)
            record.department_name = dept_name
            records[user.id] = record
        if role_name is not None:
            record.role_names.append(role_name)
    return list(records.values())


class UserService:
    """
    账号管理模块服务层
    """

    @classmethod
    def add_user(cls, db: Session, user_data: CreateUserModel) -> SysUser:
        """
        新增账号，使用初始密码
        
        Args:
            db: 数据库会话
            user_data: 账号数据
            
        Returns:
            新建的账号
        """
        if settings.ROOT_ROLE_ID in user_data.roles:
            raise ApiException(ErrorCode.BUILT_IN_RESOURCE)
        if UserDao.get_user_by_username(db, user_data.username):
            raise ApiException(ErrorCode.USER_EXISTS)
        if not DeptDao.get_dept_by_id(db, user_data.department_id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        
        try:
            salt = PasswordUtil.generate_salt()
            user = SysUser(
                department_id=user_data.department_id,
                name=user_data.name,
                username=user_data.username,
                password=PasswordUtil.get_password_hash(settings.SYS_USER_INIT_PASSWORD, salt),
                psalt=salt,
                nick_name=user_data.nick_name,
                email=user_data.email,
                phone=user_data.phone,
                remark=user_data.remark,
                status=user_data.status
            )
            UserDao.add_user(db, user)
            UserRoleDao.add_user_roles(db, user.id, user_data.roles)
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        logger.info(f"新增账号 {user.username} (ID: {user.id})，角色: {user_data.roles}")
        return user

    @classmethod
    def update_user(cls, db: Session, user_data: UpdateUserModel) -> None:
        """
        修改账号信息及角色；状态改为禁用时清除其会话缓存
        
        Args:
            db: 数据库会话
            user_data: 账号数据
        """
        if not UserDao.get_user_by_id(db, user_data.id):
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        if UserDao.get_user_by_username(db, user_data.username, exclude_user_id=user_data.id):
            raise ApiException(ErrorCode.USER_EXISTS)
        cls._check_root_role(db, user_data)
        if not DeptDao.get_dept_by_id(db, user_data.department_id):
            raise ApiException(ErrorCode.DEPT_NOT_FOUND)
        
        try:
            UserDao.update_user(db, user_data.id, {
                "department_id": user_data.department_id,
                "name": user_data.name,
                "username": user_data.username,
                "nick_name": user_data.nick_name,
                "email": user_data.email,
                "phone": user_data.phone,
                "remark": user_data.remark,
                "status": user_data.status,
            })
            UserRoleDao.delete_by_user_ids(db, [user_data.id])
            UserRoleDao.add_user_roles(db, user_data.id, user_data.roles)
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        logger.info(f"修改账号 {user_data.id}，角色: {user_data.roles}，状态: {user_data.status}")
        if user_data.status == USER_STATUS_DISABLED:
            cls.forbidden(user_data.id)

    @classmethod
    def get_user_info(cls, db: Session, user_id: int) -> UserDetailModel:
        """
        获取账号详情
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            
        Returns:
            账号详情（不含密码），附带角色ID列表与部门名称
        """
        user = UserDao.get_user_by_id(db, user_id)
        if not user:
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        dept = DeptDao.get_dept_by_id(db, user.department_id)
        if not dept:
            raise ApiException(ErrorCode.USER_DEPT_NOT_FOUND)
        
        detail = UserDetailModel.model_validate(user)
        detail.roles = UserRoleDao.get_role_ids_by_user_id(db, user_id)
        detail.department_name = dept.name
        return detail

    @classmethod
    def get_user_info_list(cls, db: Session, user_ids: List[int]) -> List[UserBaseModel]:
        """根据ID列表获取账号信息"""
        return [UserBaseModel.model_validate(user) for user in UserDao.get_users_by_ids(db, user_ids)]

    @classmethod
    def delete_users(cls, db: Session, user_ids: List[int]) -> None:
        """
        删除账号及其角色关联，不允许删除超级管理员账号
        
        Args:
            db: 数据库会话
            user_ids: 账号ID列表
        """
        root_user_id = cls.find_root_user_id(db)
        if root_user_id is not None and root_user_id in user_ids:
            raise ApiException(ErrorCode.BUILT_IN_RESOURCE)
        
        try:
            UserDao.delete_users(db, user_ids)
            UserRoleDao.delete_by_user_ids(db, user_ids)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"删除账号: {user_ids}")

    @classmethod
    def count_users(cls, db: Session, user_id: int, dept_ids: Optional[List[int]] = None) -> int:
        """
        统计账号数量，不含超级管理员账号与当前账号
        
        Args:
            db: 数据库会话
            user_id: 当前账号ID
            dept_ids: 部门ID过滤
            
        Returns:
            账号数量
        """
        exclude_ids = [cls.find_root_user_id(db), user_id]
        return UserDao.count_users(db, exclude_ids, dept_ids)

    @classmethod
    def page_users(cls, db: Session, user_id: int, query: PageSearchUserModel) -> PageResultModel[UserPageItemModel]:
        """
        分页查询账号，不含超级管理员账号与当前账号
        
        先按ID分页取出账号ID，再关联部门与角色查询展开行并按账号合并，
        保证每页条数与总数统计一致。
        
        Args:
            db: 数据库会话
            user_id: 当前账号ID
            query: 分页及部门过滤条件
            
        Returns:
            分页结果
        """
        exclude_ids = [cls.find_root_user_id(db), user_id]
        total = UserDao.count_users(db, exclude_ids, query.department_ids)
        page_ids = UserDao.page_user_ids(db, exclude_ids, query.department_ids, query.offset, query.limit)
        rows = UserDao.get_user_rows_with_dept_and_roles(db, page_ids)
        return PageResultModel[UserPageItemModel](
            items=fold_user_rows(rows),
            pagination=PaginationModel(total=total, page=query.page, size=query.limit)
        )

    @classmethod
    def find_root_user_id(cls, db: Session) -> Optional[int]:
        """获取超级管理员账号ID（按配置的超级管理员登录账号查找）"""
        user = UserDao.get_user_by_username(db, settings.ROOT_USERNAME)
        return user.id if user else None

    @classmethod
    def _check_root_role(cls, db: Session, user_data: UpdateUserModel) -> None:
        """
        超级管理员角色只属于超级管理员账号
        
        超级管理员账号不能改名，也不能移除超级管理员角色；
        其他账号不能被授予超级管理员角色。
        """
        has_root_role = settings.ROOT_ROLE_ID in user_data.roles
        if user_data.id == cls.find_root_user_id(db):
            if not has_root_role or user_data.username != settings.ROOT_USERNAME:
                raise ApiException(ErrorCode.BUILT_IN_RESOURCE)
        elif has_root_role:
            raise ApiException(ErrorCode.BUILT_IN_RESOURCE)

    @classmethod
    def find_user_by_username(cls, db: Session, username: str) -> Optional[SysUser]:
        """根据登录账号获取启用状态的账号"""
        return UserDao.get_enabled_user_by_username(db, username)

    @classmethod
    def get_account_info(cls, db: Session, user_id: int, ip: Optional[str] = None) -> AccountInfoModel:
        """
        获取个人信息
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            ip: 请求来源IP
            
        Returns:
            个人信息
        """
        user = UserDao.get_user_by_id(db, user_id)
        if not user:
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        info = AccountInfoModel.model_validate(user)
        info.login_ip = ip
        return info

    @classmethod
    def update_person_info(cls, db: Session, user_id: int, info: UpdatePersonInfoModel) -> None:
        """修改个人信息，只更新提交的字段"""
        if not UserDao.get_user_by_id(db, user_id):
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        try:
            UserDao.update_user(db, user_id, info.model_dump(exclude_unset=True, exclude_none=True))
            db.commit()
        except Exception:
            db.rollback()
            raise

    @classmethod
    def update_password(cls, db: Session, user_id: int, password_data: UpdatePasswordModel) -> None:
        """
        修改个人密码，原密码校验通过后更新，并使已签发的令牌失效
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            password_data: 原密码与新密码
        """
        user = UserDao.get_user_by_id(db, user_id)
        if not user:
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        if not PasswordUtil.verify_password(password_data.origin_password, user.psalt, user.password):
            raise ApiException(ErrorCode.PASSWORD_MISMATCH)
        
        try:
            UserDao.update_user(db, user_id, {
                "password": PasswordUtil.get_password_hash(password_data.new_password, user.psalt)
            })
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"账号 {user_id} 修改了密码")
        cls.upgrade_password_version(user_id)

    @classmethod
    def force_update_password(cls, db: Session, user_id: int, password: str) -> None:
        """
        管理员重置账号密码
        
        Args:
            db: 数据库会话
            user_id: 账号ID
            password: 新密码
        """
        user = UserDao.get_user_by_id(db, user_id)
        if not user:
            raise ApiException(ErrorCode.USER_NOT_FOUND)
        try:
            UserDao.update_user(db, user_id, {
                "password": PasswordUtil.get_password_hash(password, user.psalt)
            })
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"账号 {user_id} 的密码已被重置")
        cls.upgrade_password_version(user_id)

    @classmethod
    def forbidden(cls, user_id: int) -> None:
        """清除账号的会话缓存，使其立即下线"""
        redis_client.delete(*AdminCacheKey.user_keys(user_id))
        logger.info(f"账号 {user_id} 的会话缓存已清除")

    @classmethod
    def multi_forbidden(cls, user_ids: List[int]) -> None:
        """批量清除账号的会话缓存"""
        if not user_ids:
            return
        keys = [key for user_id in user_ids for key in AdminCacheKey.user_keys(user_id)]
        redis_client.delete(*keys)
        logger.info(f"账号 {user_ids} 的会话缓存已清除")

    @classmethod
    def upgrade_password_version(cls, user_id: int) -> Optional[int]:
        """
        密码版本号加一，仅在账号在线（版本号存在）时生效
        
        Returns:
            新的版本号，账号不在线时为None
        """
        version = redis_client.incr_if_exists(AdminCacheKey.password_version(user_id))
        if version is None:
            logger.error(f"账号 {user_id} 的密码版本号更新失败，已签发的令牌未失效")
            return None
        return version or None
