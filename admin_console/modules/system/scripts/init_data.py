"""
初始化数据脚本

创建数据表，并写入根部门、超级管理员角色、超级管理员账号以及系统管理菜单。
"""
from sqlalchemy import select

from admin_console.core.config import settings
from admin_console.db.session import SessionLocal, init_db
from admin_console.modules.system.models.user import SysUser, SysRole, SysUserRole, SysDepartment
from admin_console.modules.system.models.menu import SysMenu
from admin_console.modules.system.utils.auth_util import PasswordUtil

# (名称, 路由, 权限标识)
SYSTEM_MENUS = [
    ("账号管理", "/sys/data", "sys:data:add,sys:data:info,sys:data:delete,sys:data:page,sys:data:update,sys:data:password"),
    ("部门管理", "/sys/deptdata", "sys:deptdata:list,sys:deptdata:add,sys:deptdata:delete,sys:deptdata:info,sys:deptdata:update,sys:deptdata:transfer,sys:deptdata:move"),
    ("角色管理", "/sys/roledata", "sys:roledata:list,sys:roledata:page,sys:roledata:delete,sys:roledata:add,sys:roledata:update,sys:roledata:info"),
]


def init_admin_data():
    """初始化超级管理员数据"""
    init_db()
    db = SessionLocal()
    try:
        if db.execute(select(SysUser).where(SysUser.username == settings.ROOT_USERNAME)).scalar_one_or_none():
            print("超级管理员账号已存在，跳过初始化")
            return
        
        dept = SysDepartment(name="总部", parent_id=None, order_num=0)
        db.add(dept)
        db.flush()
        
        role = db.get(SysRole, settings.ROOT_ROLE_ID)
        if role is None:
            role = SysRole(id=settings.ROOT_ROLE_ID, user_id="0", name="超级管理员", label="root", remark="系统内置角色")
            db.add(role)
            db.flush()
        
        salt = PasswordUtil.generate_salt()
        user = SysUser(
            department_id=dept.id,
            name="超级管理员",
            username=settings.ROOT_USERNAME,
            password=PasswordUtil.get_password_hash(settings.SYS_USER_INIT_PASSWORD, salt),
            psalt=salt,
            nick_name="root",
            status=1
        )
        db.add(user)
        db.flush()
        db.add(SysUserRole(user_id=user.id, role_id=role.id))
        
        parent = SysMenu(name="系统管理", router="/sys", type=0, order_num=0)
        db.add(parent)
        db.flush()
        for order_num, (name, router, perms) in enumerate(SYSTEM_MENUS):
            db.add(SysMenu(parent_id=parent.id, name=name, router=router, perms=perms, type=1, order_num=order_num))
        
        db.commit()
        print("初始化数据创建成功！")
        print(f"超级管理员账号: {settings.ROOT_USERNAME} / {settings.SYS_USER_INIT_PASSWORD}")
        
    except Exception as e:
        print(f"初始化数据失败: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_admin_data()
