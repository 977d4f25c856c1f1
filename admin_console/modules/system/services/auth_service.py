"""
登录认证服务
"""
import json
import logging
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from admin_console.core.exceptions import ApiException, ErrorCode
from admin_console.modules.system.constants import AdminCacheKey
from admin_console.modules.system.models.user import SysUser
from admin_console.modules.system.schemas.auth import LoginModel, LoginTokenModel
from admin_console.modules.system.services.menu_service import MenuService
from admin_console.modules.system.services.user_service import UserService
from admin_console.modules.system.utils.auth_util import PasswordUtil, JWTUtil
from admin_console.services.redis_client import redis_client

logger = logging.getLogger(__name__)


class AuthService:
    """认证服务类"""
    
    @classmethod
    def authenticate_user(cls, db: Session, username: str, password: str) -> Optional[SysUser]:
        """
        验证账号身份
        
        Args:
            db: 数据库会话
            username: 登录账号
            password: 密码
            
        Returns:
            账号对象，账号不存在、已禁用或密码错误时返回None
        """
        user = UserService.find_user_by_username(db, username)
        if not user:
            return None
        if not PasswordUtil.verify_password(password, user.psalt, user.password):
            return None
        return user
    
    @classmethod
    def login(cls, db: Session, login_data: LoginModel, client_ip: str = "unknown") -> LoginTokenModel:
        """
        账号登录
        
        签发令牌 {uid, pv}，并写入密码版本号、令牌和权限缓存。
        
        Args:
            db: 数据库会话
            login_data: 登录数据
            client_ip: 请求来源IP
            
        Returns:
            访问令牌
        """
        user = cls.authenticate_user(db, login_data.username, login_data.password)
        if not user:
            logger.warning(f"登录失败: {login_data.username} ({client_ip})")
            raise ApiException(ErrorCode.INVALID_LOGIN)
        
        password_version = 1
        token = JWTUtil.create_access_token({"uid": user.id, "pv": password_version})
        expire = JWTUtil.get_token_expire_time()
        perms = MenuService.get_perms(db, user.id)
        
        redis_client.set(AdminCacheKey.password_version(user.id), password_version)
        redis_client.set(AdminCacheKey.token(user.id), token, ex=expire)
        redis_client.set(AdminCacheKey.perms(user.id), json.dumps(perms), ex=expire)
        
        logger.info(f"账号 {user.username} (ID: {user.id}) 登录成功 ({client_ip})")
        return LoginTokenModel(token=token)
    
    @classmethod
    def verify_token(cls, token: str) -> Dict[str, Any]:
        """
        校验令牌
        
        令牌中的密码版本号必须与缓存一致，且令牌必须是该账号当前的令牌。
        
        Args:
            token: JWT令牌
            
        Returns:
            令牌载荷
        """
        payload = JWTUtil.decode_access_token(token)
        uid = payload.get("uid")
        if uid is None:
            raise ApiException(ErrorCode.LOGIN_INVALID)
        
        cached_version = redis_client.get(AdminCacheKey.password_version(uid))
        if cached_version is None or str(payload.get("pv")) != str(cached_version):
            raise ApiException(ErrorCode.LOGIN_EXPIRED)
        if redis_client.get(AdminCacheKey.token(uid)) != token:
            raise ApiException(ErrorCode.LOGIN_EXPIRED)
        return payload
    
    @classmethod
    def get_cached_perms(cls, user_id: int) -> list:
        """获取缓存中的权限标识"""
        perms = redis_client.get(AdminCacheKey.perms(user_id))
        return json.loads(perms) if perms else []
