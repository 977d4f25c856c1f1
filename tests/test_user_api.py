from sqlalchemy import select

from admin_console.modules.system.constants import AdminCacheKey
from admin_console.modules.system.models.user import SysUser, SysUserRole, SysRole, SysDepartment
from admin_console.modules.system.utils.auth_util import PasswordUtil
from tests.conftest import API, create_user, login


def _user_payload(seed, **overrides):
    payload = {
        "departmentId": seed["dept_id"],
        "name": "张三",
        "nickName": "zhangsan",
        "roles": [seed["staff_role_id"]],
        "username": "zhangsan",
        "email": "zhangsan@example.com",
        "status": 1,
    }
    payload.update(overrides)
    return payload


def test_add_user_uses_initial_password(client, root_headers, seed, db_session):
    response = client.post(f"{API}/sys/data/add", json=_user_payload(seed), headers=root_headers)
    assert response.status_code == 200
    assert response.json()["code"] == 200

    user = db_session.execute(select(SysUser).where(SysUser.username == "zhangsan")).scalar_one()
    assert len(user.psalt) == 32
    assert user.password == PasswordUtil.get_password_hash("123456", user.psalt)
    role_ids = db_session.execute(
        select(SysUserRole.role_id).where(SysUserRole.user_id == user.id)
    ).scalars().all()
    assert role_ids == [seed["staff_role_id"]]


def test_add_user_with_existing_username(client, root_headers, seed):
    response = client.post(f"{API}/sys/data/add", json=_user_payload(seed, username="rootadmin"), headers=root_headers)
    assert response.status_code == 400
    assert response.json()["code"] == 10001


def test_add_user_requires_roles(client, root_headers, seed):
    response = client.post(f"{API}/sys/data/add", json=_user_payload(seed, roles=[]), headers=root_headers)
    assert response.status_code == 422
    assert response.json()["code"] == 10000


def test_user_info(client, root_headers, seed, db_session):
    user = create_user(db_session, "lisi0001", seed["dept_id"], [seed["staff_role_id"]])
    response = client.get(f"{API}/sys/data/info", params={"userId": user.id}, headers=root_headers)
    data = response.json()["data"]
    assert data["username"] == "lisi0001"
    assert data["roles"] == [seed["staff_role_id"]]
    assert data["departmentName"] == "总部"
    assert "password" not in data
    assert "psalt" not in data


def test_user_info_not_found(client, root_headers):
    response = client.get(f"{API}/sys/data/info", params={"userId": 999}, headers=root_headers)
    assert response.json()["code"] == 10017


def test_user_info_department_missing(client, root_headers, db_session):
    user = create_user(db_session, "orphan01", 999)
    response = client.get(f"{API}/sys/data/info", params={"userId": user.id}, headers=root_headers)
    assert response.json()["code"] == 10018


def test_page_excludes_root_and_caller(client, seed, db_session):
    operator = create_user(db_session, "operator", seed["dept_id"], [seed["staff_role_id"]])
    other = create_user(db_session, "other001", seed["dept_id"], [seed["staff_role_id"]])
    headers = login(client, "operator")

    response = client.post(f"{API}/sys/data/page", json={"page": 1, "limit": 10}, headers=headers)
    data = response.json()["data"]
    ids = [item["id"] for item in data["list"]]
    assert ids == [other.id]
    assert seed["root_user_id"] not in ids
    assert operator.id not in ids
    assert data["pagination"] == {"total": 1, "page": 1, "size": 10}


def test_page_folds_role_names(client, root_headers, seed, db_session):
    manager_role = SysRole(user_id="1", name="经理", label="manager")
    db_session.add(manager_role)
    db_session.commit()
    multi = create_user(db_session, "multi001", seed["dept_id"], [seed["staff_role_id"], manager_role.id])
    no_role = create_user(db_session, "norole01", seed["dept_id"])

    response = client.post(f"{API}/sys/data/page", json={"page": 1, "limit": 10}, headers=root_headers)
    records = {item["id"]: item for item in response.json()["data"]["list"]}
    assert len(records) == 2
    assert records[multi.id]["roleNames"] == ["普通员工", "经理"]
    assert records[multi.id]["departmentName"] == "总部"
    assert records[no_role.id]["roleNames"] == []


def test_page_limit_counts_users_not_rows(client, root_headers, seed, db_session):
    manager_role = SysRole(user_id="1", name="经理", label="manager")
    db_session.add(manager_role)
    db_session.commit()
    first = create_user(db_session, "first001", seed["dept_id"], [seed["staff_role_id"], manager_role.id])
    second = create_user(db_session, "second01", seed["dept_id"], [seed["staff_role_id"]])

    response = client.post(f"{API}/sys/data/page", json={"page": 1, "limit": 1}, headers=root_headers)
    data = response.json()["data"]
    assert [item["id"] for item in data["list"]] == [first.id]
    assert data["list"][0]["roleNames"] == ["普通员工", "经理"]
    assert data["pagination"]["total"] == 2

    response = client.post(f"{API}/sys/data/page", json={"page": 2, "limit": 1}, headers=root_headers)
    assert [item["id"] for item in response.json()["data"]["list"]] == [second.id]


def test_page_filters_by_department(client, root_headers, seed, db_session):
    branch = SysDepartment(name="分部", parent_id=seed["dept_id"], order_num=1)
    db_session.add(branch)
    db_session.commit()
    create_user(db_session, "hq000001", seed["dept_id"], [seed["staff_role_id"]])
    branch_user = create_user(db_session, "branch01", branch.id, [seed["staff_role_id"]])

    response = client.post(
        f"{API}/sys/data/page",
        json={"page": 1, "limit": 10, "departmentIds": [branch.id]},
        headers=root_headers
    )
    assert [item["id"] for item in response.json()["data"]["list"]] == [branch_user.id]


def test_page_rejects_invalid_limit(client, root_headers):
    response = client.post(f"{API}/sys/data/page", json={"page": 1, "limit": 101}, headers=root_headers)
    assert response.status_code == 422
    assert response.json()["code"] == 10000


def test_delete_root_user_is_forbidden(client, root_headers, seed, db_session):
    response = client.post(f"{API}/sys/data/delete", json={"userIds": [seed["root_user_id"]]}, headers=root_headers)
    assert response.json()["code"] == 10016
    assert db_session.get(SysUser, seed["root_user_id"]) is not None


def test_root_user_stays_protected_after_update(client, root_headers, seed, db_session):
    create_user(db_session, "deputy01", seed["dept_id"], [seed["root_role_id"]])
    payload = _user_payload(seed, id=seed["root_user_id"], username="rootadmin", roles=[seed["root_role_id"]])
    response = client.post(f"{API}/sys/data/update", json=payload, headers=root_headers)
    assert response.json()["code"] == 200

    response = client.post(f"{API}/sys/data/delete", json={"userIds": [seed["root_user_id"]]}, headers=root_headers)
    assert response.json()["code"] == 10016
    assert db_session.get(SysUser, seed["root_user_id"]) is not None

    response = client.post(f"{API}/sys/data/page", json={"page": 1, "limit": 10}, headers=root_headers)
    assert seed["root_user_id"] not in [item["id"] for item in response.json()["data"]["list"]]


def test_update_root_user_cannot_drop_root_role(client, root_headers, seed, db_session):
    payload = _user_payload(seed, id=seed["root_user_id"], username="rootadmin")
    response = client.post(f"{API}/sys/data/update", json=payload, headers=root_headers)
    assert response.json()["code"] == 10016
    role_ids = db_session.execute(
        select(SysUserRole.role_id).where(SysUserRole.user_id == seed["root_user_id"])
    ).scalars().all()
    assert role_ids == [seed["root_role_id"]]


def test_update_root_user_cannot_rename(client, root_headers, seed):
    payload = _user_payload(seed, id=seed["root_user_id"], username="newroot1", roles=[seed["root_role_id"]])
    response = client.post(f"{API}/sys/data/update", json=payload, headers=root_headers)
    assert response.json()["code"] == 10016


def test_root_role_cannot_be_granted(client, root_headers, seed, db_session):
    response = client.post(
        f"{API}/sys/data/add", json=_user_payload(seed, roles=[seed["root_role_id"]]), headers=root_headers
    )
    assert response.json()["code"] == 10016
    assert db_session.execute(select(SysUser).where(SysUser.username == "zhangsan")).scalar_one_or_none() is None

    user = create_user(db_session, "zhangsan", seed["dept_id"], [seed["staff_role_id"]])
    payload = _user_payload(seed, id=user.id, roles=[seed["staff_role_id"], seed["root_role_id"]])
    response = client.post(f"{API}/sys/data/update", json=payload, headers=root_headers)
    assert response.json()["code"] == 10016


def test_delete_user_removes_roles_and_session(client, root_headers, seed, db_session, fake_redis):
    user = create_user(db_session, "wangwu01", seed["dept_id"], [seed["staff_role_id"]])
    user_id = user.id
    login(client, "wangwu01")
    assert fake_redis.exists(AdminCacheKey.token(user_id))

    response = client.post(f"{API}/sys/data/delete", json={"userIds": [user_id]}, headers=root_headers)
    assert response.json()["code"] == 200
    assert db_session.get(SysUser, user_id) is None
    assert db_session.execute(
        select(SysUserRole).where(SysUserRole.user_id == user_id)
    ).first() is None
    for key in AdminCacheKey.user_keys(user_id):
        assert not fake_redis.exists(key)


def test_update_user_replaces_roles(client, root_headers, seed, db_session):
    manager_role = SysRole(user_id="1", name="经理", label="manager")
    db_session.add(manager_role)
    db_session.commit()
    user = create_user(db_session, "zhaoliu1", seed["dept_id"], [seed["staff_role_id"]])

    payload = _user_payload(seed, id=user.id, username="zhaoliu1", name="赵六", roles=[manager_role.id])
    response = client.post(f"{API}/sys/data/update", json=payload, headers=root_headers)
    assert response.json()["code"] == 200

    db_session.expire_all()
    assert db_session.get(SysUser, user.id).name == "赵六"
    role_ids = db_session.execute(
        select(SysUserRole.role_id).where(SysUserRole.user_id == user.id)
    ).scalars().all()
    assert role_ids == [manager_role.id]


def test_disabling_user_drops_session(client, root_headers, seed, db_session, fake_redis):
    user = create_user(db_session, "sunqi001", seed["dept_id"], [seed["staff_role_id"]])
    user_id = user.id
    login(client, "sunqi001")

    payload = _user_payload(seed, id=user_id, username="sunqi001", status=0)
    assert client.post(f"{API}/sys/data/update", json=payload, headers=root_headers).json()["code"] == 200
    for key in AdminCacheKey.user_keys(user_id):
        assert not fake_redis.exists(key)


def test_force_update_password(client, root_headers, seed, db_session, fake_redis):
    user = create_user(db_session, "zhouba01", seed["dept_id"], [seed["staff_role_id"]])
    user_id = user.id
    login(client, "zhouba01")

    response = client.post(f"{API}/sys/data/password", json={"userId": user_id, "password": "newpass1"}, headers=root_headers)
    assert response.json()["code"] == 200
    assert fake_redis.get(AdminCacheKey.password_version(user_id)) == "2"

    db_session.expire_all()
    user = db_session.get(SysUser, user_id)
    assert PasswordUtil.verify_password("newpass1", user.psalt, user.password)
