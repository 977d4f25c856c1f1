# SQLAlchemy基类定义
from sqlalchemy.orm import declarative_base

# 创建基类
Base = declarative_base()

# 注意：不在这里导入模型以避免循环导入
# 模型统一在 admin_console.modules.system.models 中注册
