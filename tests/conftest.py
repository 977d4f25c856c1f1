import os

# 测试环境配置，需在导入应用前设置
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["LOG_FILE"] = ""

import fnmatch
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from admin_console.core.config import settings
from admin_console.db.base import Base
from admin_console.db.session import get_db
from admin_console.main import app
from admin_console.modules.system.models.user import SysUser, SysRole, SysUserRole, SysDepartment
from admin_console.modules.system.utils.auth_util import PasswordUtil
from admin_console.services.redis_client import redis_client

API = settings.API_V1_STR

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRedis:
    """基于字典的Redis替身，只实现用到的命令"""

    def __init__(self):
        self.store = {}
        self.ttl = {}

    def ping(self):
        return True

    def set(self, key, value, ex=None):
        self.store[key] = str(value)
        if ex is not None:
            self.ttl[key] = ex
        return True

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        count = 0
        for key in keys:
            if key in self.store:
                del self.store[key]
                self.ttl.pop(key, None)
                count += 1
        return count

    def exists(self, *keys):
        return sum(1 for key in keys if key in self.store)

    def eval(self, script, numkeys, *keys_and_args):
        # 只支持“键存在时自增”脚本
        key = keys_and_args[0]
        if key not in self.store:
            return 0
        value = int(self.store[key]) + 1
        self.store[key] = str(value)
        return value

    def scan_iter(self, match=None):
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    def close(self):
        pass


@pytest.fixture
def fake_redis():
    """将全局Redis客户端替换为字典实现"""
    fake = FakeRedis()
    with patch.object(redis_client, "client", fake), patch.object(redis_client, "is_connected", True):
        yield fake


@pytest.fixture
def db_session():
    """每个测试使用全新的内存数据库"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, fake_redis):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def create_user(db, username, department_id, role_ids=(), password=None, status=1, name=None):
    """直接写库创建账号"""
    salt = PasswordUtil.generate_salt()
    user = SysUser(
        department_id=department_id,
        name=name or username,
        username=username,
        password=PasswordUtil.get_password_hash(password or settings.SYS_USER_INIT_PASSWORD, salt),
        psalt=salt,
        status=status
    )
    db.add(user)
    db.flush()
    for role_id in role_ids:
        db.add(SysUserRole(user_id=user.id, role_id=role_id))
    db.commit()
    return user


@pytest.fixture
def seed(db_session):
    """根部门、超级管理员角色、超级管理员账号以及一个普通角色"""
    dept = SysDepartment(name="总部", parent_id=None, order_num=0)
    db_session.add(dept)
    db_session.flush()
    root_role = SysRole(id=settings.ROOT_ROLE_ID, user_id="0", name="超级管理员", label="root")
    db_session.add(root_role)
    db_session.flush()
    staff_role = SysRole(user_id="1", name="普通员工", label="staff")
    db_session.add(staff_role)
    db_session.commit()
    root_user = create_user(db_session, "rootadmin", dept.id, [root_role.id])
    return {
        "dept_id": dept.id,
        "root_role_id": root_role.id,
        "staff_role_id": staff_role.id,
        "root_user_id": root_user.id,
    }


def login(client, username, password=None):
    """登录并返回认证请求头"""
    response = client.post(f"{API}/auth/login", json={
        "username": username,
        "password": password or settings.SYS_USER_INIT_PASSWORD
    })
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def root_headers(client, seed):
    return login(client, "rootadmin")
