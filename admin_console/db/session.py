from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from admin_console.core.config import settings

# 导入所有模型，确保在创建会话前所有模型类都已加载
from admin_console.db.base import Base
import admin_console.modules.system.models

engine_options = {
    "pool_pre_ping": settings.DB_POOL_PRE_PING,
    "echo": settings.DB_ECHO,
}

# MySQL 连接池与连接参数，其他驱动（如测试用的SQLite）使用默认连接池
if settings.SQLALCHEMY_DATABASE_URI.startswith("mysql"):
    engine_options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={
            "charset": "utf8mb4",
            "autocommit": False,
            "connect_timeout": 10,
            "read_timeout": 30,
            "write_timeout": 30
        }
    )

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **engine_options)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=settings.DB_AUTOFLUSH,
    bind=engine
)

# 依赖项
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """创建所有数据表"""
    Base.metadata.create_all(bind=engine)
