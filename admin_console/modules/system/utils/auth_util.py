"""
认证工具类
"""
import hashlib
import secrets
import string
import jwt
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from admin_console.core.config import settings
from admin_console.core.exceptions import ApiException, ErrorCode


class PasswordUtil:
    """密码工具类，密码存储为 md5(明文 + 盐)"""
    
    SALT_ALPHABET = string.ascii_letters + string.digits
    
    @classmethod
    def generate_salt(cls, length: int = 32) -> str:
        """
        生成随机盐
        
        Args:
            length: 盐长度
            
        Returns:
            由字母和数字组成的随机字符串
        """
        return "".join(secrets.choice(cls.SALT_ALPHABET) for _ in range(length))
    
    @classmethod
    def get_password_hash(cls, password: str, salt: str) -> str:
        """
        获取密码哈希
        
        Args:
            password: 明文密码
            salt: 账号的密码盐
            
        Returns:
            哈希密码
        """
        return hashlib.md5(f"{password}{salt}".encode("utf-8")).hexdigest()
    
    @classmethod
    def verify_password(cls, plain_password: str, salt: str, hashed_password: str) -> bool:
        """验证密码"""
        return secrets.compare_digest(cls.get_password_hash(plain_password, salt), hashed_password)


class JWTUtil:
    """JWT工具类"""
    
    @classmethod
    def create_access_token(cls, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        创建访问令牌
        
        Args:
            data: 要编码的数据
            expires_delta: 过期时间增量
            
        Returns:
            JWT令牌
        """
        to_encode = data.copy()
        
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
            
        to_encode.update({"exp": expire})
        to_encode.update({"iat": datetime.now(timezone.utc)})
        to_encode.update({"jti": str(uuid.uuid4())})
        
        return jwt.encode(
            to_encode, 
            settings.JWT_SECRET_KEY, 
            algorithm=settings.JWT_ALGORITHM
        )
    
    @classmethod
    def decode_access_token(cls, token: str) -> Dict[str, Any]:
        """
        解码访问令牌
        
        Args:
            token: JWT令牌
            
        Returns:
            解码后的数据
            
        Raises:
            ApiException: 令牌无效(11001)或已过期(11002)
        """
        try:
            return jwt.decode(
                token, 
                settings.JWT_SECRET_KEY, 
                algorithms=[settings.JWT_ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            raise ApiException(ErrorCode.LOGIN_EXPIRED)
        except jwt.InvalidTokenError:
            raise ApiException(ErrorCode.LOGIN_INVALID)
    
    @classmethod
    def get_token_expire_time(cls) -> int:
        """
        获取令牌过期时间（秒）
        
        Returns:
            过期时间秒数
        """
        return settings.JWT_EXPIRE_MINUTES * 60
