"""
系统用户、部门、角色模型
"""
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime

from admin_console.db.base import Base


class SysUser(Base):
    """管理员账号"""
    __tablename__ = "sys_user"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    department_id = Column(Integer, nullable=False, index=True, comment="所属部门ID")
    name = Column(String(255), nullable=False, comment="姓名")
    username = Column(String(255), unique=True, nullable=False, comment="登录账号")
    password = Column(String(255), nullable=False, comment="密码哈希 md5(password + psalt)")
    psalt = Column(String(32), nullable=False, comment="密码盐")
    nick_name = Column(String(255), comment="昵称")
    head_img = Column(String(255), comment="头像")
    email = Column(String(255))
    phone = Column(String(255))
    remark = Column(String(255))
    status = Column(Integer, default=1, nullable=False, comment="状态 0:禁用 1:启用")
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class SysDepartment(Base):
    """部门"""
    __tablename__ = "sys_department"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    parent_id = Column(Integer, nullable=True, index=True, comment="上级部门ID，为空表示根部门")
    name = Column(String(255), nullable=False)
    order_num = Column(Integer, default=0, comment="排序")
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class SysRole(Base):
    """角色"""
    __tablename__ = "sys_role"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(String(255), nullable=False, comment="创建者账号ID")
    name = Column(String(255), unique=True, nullable=False)
    label = Column(String(50), unique=True, nullable=False, comment="角色标识")
    remark = Column(String(255))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class SysUserRole(Base):
    """账号与角色关联"""
    __tablename__ = "sys_user_role"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    role_id = Column(Integer, nullable=False, index=True)
