# 导入所有模型类，确保建表时全部注册到 Base.metadata
from admin_console.modules.system.models.user import SysUser, SysDepartment, SysRole, SysUserRole
from admin_console.modules.system.models.menu import SysMenu, SysRoleMenu, SysRoleDepartment

__all__ = [
    "SysUser", "SysDepartment", "SysRole", "SysUserRole",
    "SysMenu", "SysRoleMenu", "SysRoleDepartment",
]
