from pydantic_settings import BaseSettings
from typing import Optional
from dotenv import load_dotenv
from pathlib import Path
from pydantic import Field

load_dotenv()

class Settings(BaseSettings):
    # API配置
    API_V1_STR: str = Field(default="/api/v1", description="API路由前缀")
    PROJECT_NAME: str = Field(default="Admin Console", description="项目名称")
    PROJECT_DESCRIPTION: str = Field(default="系统管理后台API（账号、部门、角色）", description="项目描述")
    PROJECT_VERSION: str = Field(default="1.0.0", description="项目版本")
    REST_PORT: int = Field(default=8000, description="REST API端口")

    # 服务配置
    DEBUG: bool = Field(default=True, description="是否启用调试模式")
    LOG_LEVEL: str = Field(default="INFO", description="日志级别")
    LOG_FILE: Optional[str] = Field(default="app.log", description="日志文件名，为空时只输出到控制台")

    # 项目路径配置
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent

    # 数据库配置
    MYSQL_SERVER: str = Field(default="127.0.0.1", description="MySQL服务器地址")
    MYSQL_USER: str = Field(default="root", description="MySQL用户名")
    MYSQL_PASSWORD: str = Field(default="123456", description="MySQL密码")
    MYSQL_DB: str = Field(default="admin_console", description="MySQL数据库名")
    MYSQL_PORT: int = Field(default=3306, description="MySQL端口")

    # 数据库URL，未设置时由MySQL配置拼接
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # 数据库连接池配置
    DB_POOL_SIZE: int = Field(default=20, description="连接池大小")
    DB_MAX_OVERFLOW: int = Field(default=40, description="最大溢出连接数")
    DB_POOL_TIMEOUT: int = Field(default=30, description="获取连接超时时间（秒）")
    DB_POOL_RECYCLE: int = Field(default=3600, description="连接回收时间（秒）")
    DB_POOL_PRE_PING: bool = Field(default=True, description="连接前预检查")
    DB_ECHO: bool = Field(default=False, description="是否输出SQL")
    DB_AUTOFLUSH: bool = Field(default=False, description="会话自动flush")

    # Redis配置
    REDIS_HOST: str = Field(default="127.0.0.1", description="Redis服务器地址")
    REDIS_PORT: int = Field(default=6379, description="Redis端口")
    REDIS_DB: int = Field(default=0, description="Redis数据库编号")
    REDIS_PASSWORD: Optional[str] = Field(default=None, description="Redis密码")
    ADMIN_CACHE_PREFIX: str = Field(default="admin", description="管理端缓存键前缀")

    # 系统管理配置
    ROOT_ROLE_ID: int = Field(default=1, description="超级管理员角色ID")
    ROOT_USERNAME: str = Field(default="rootadmin", description="超级管理员登录账号")
    SYS_USER_INIT_PASSWORD: str = Field(default="123456", description="新建账号的初始密码")

    # JWT配置
    ENABLE_AUTH: bool = Field(default=True, description="是否启用认证中间件")
    JWT_SECRET_KEY: str = Field(default="admin-console-secret-key", description="JWT签名密钥")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT签名算法")
    JWT_EXPIRE_MINUTES: int = Field(default=1440, description="令牌有效期（分钟）")

    # SSE配置
    SSE_MAX_QUEUE_SIZE: int = Field(default=100, description="客户端队列最大大小")
    SSE_HEARTBEAT_INTERVAL: float = Field(default=15.0, description="心跳间隔（秒）")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()

# 构建数据库URL - 使用pymysql作为MySQL驱动
if not settings.SQLALCHEMY_DATABASE_URI:
    settings.SQLALCHEMY_DATABASE_URI = (
        f"mysql+pymysql://{settings.MYSQL_USER}:{settings.MYSQL_PASSWORD}"
        f"@{settings.MYSQL_SERVER}:{settings.MYSQL_PORT}/{settings.MYSQL_DB}"
    )
