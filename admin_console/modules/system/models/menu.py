"""
菜单及角色关联模型
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime

from admin_console.db.base import Base


class SysMenu(Base):
    """菜单/权限项"""
    __tablename__ = "sys_menu"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    parent_id = Column(Integer, nullable=True, comment="上级菜单ID")
    name = Column(String(255), nullable=False)
    router = Column(String(255))
    perms = Column(String(255), comment="权限标识，多个以逗号分隔")
    type = Column(Integer, default=0, comment="类型 0:目录 1:菜单 2:权限")
    icon = Column(String(255))
    order_num = Column(Integer, default=0)
    view_path = Column(String(255))
    keepalive = Column(Boolean, default=True)
    is_show = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class SysRoleMenu(Base):
    """角色与菜单关联"""
    __tablename__ = "sys_role_menu"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, nullable=False, index=True)
    menu_id = Column(Integer, nullable=False, index=True)


class SysRoleDepartment(Base):
    """角色与部门关联"""
    __tablename__ = "sys_role_department"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, nullable=False, index=True)
    department_id = Column(Integer, nullable=False, index=True)
