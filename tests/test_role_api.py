from unittest.mock import patch

from sqlalchemy import select

from admin_console.modules.system.models.menu import SysRoleMenu, SysRoleDepartment
from admin_console.modules.system.models.user import SysRole
from tests.conftest import API, create_user


def _menu_ids(db, role_id):
    return sorted(db.execute(select(SysRoleMenu.menu_id).where(SysRoleMenu.role_id == role_id)).scalars().all())


def _dept_ids(db, role_id):
    return sorted(db.execute(
        select(SysRoleDepartment.department_id).where(SysRoleDepartment.role_id == role_id)
    ).scalars().all())


def _add_role(client, headers, **overrides):
    payload = {"name": "测试角色", "label": "tester", "remark": "测试", "menus": [], "depts": []}
    payload.update(overrides)
    response = client.post(f"{API}/sys/roledata/add", json=payload, headers=headers)
    assert response.json()["code"] == 200, response.text
    return response.json()["data"]["roleId"]


def _update_role(client, headers, role_id, menus, depts):
    return client.post(f"{API}/sys/roledata/update", json={
        "roleId": role_id, "name": "测试角色", "label": "tester", "menus": menus, "depts": depts
    }, headers=headers)


def test_role_list_excludes_root(client, root_headers, seed):
    response = client.get(f"{API}/sys/roledata/list", headers=root_headers)
    ids = [item["id"] for item in response.json()["data"]]
    assert ids == [seed["staff_role_id"]]


def test_role_page_excludes_root(client, root_headers, seed):
    _add_role(client, root_headers, name="第二角色", label="second")
    response = client.get(f"{API}/sys/roledata/page", params={"page": 1, "limit": 1}, headers=root_headers)
    data = response.json()["data"]
    assert [item["id"] for item in data["list"]] == [seed["staff_role_id"]]
    assert data["pagination"] == {"total": 2, "page": 1, "size": 1}

    response = client.get(f"{API}/sys/roledata/page", params={"page": 2, "limit": 1}, headers=root_headers)
    assert [item["label"] for item in response.json()["data"]["list"]] == ["second"]


def test_add_role_records_creator_and_associations(client, root_headers, seed, db_session):
    role_id = _add_role(client, root_headers, menus=[1, 2], depts=[seed["dept_id"]])

    role = db_session.get(SysRole, role_id)
    assert role.user_id == str(seed["root_user_id"])
    assert _menu_ids(db_session, role_id) == [1, 2]
    assert _dept_ids(db_session, role_id) == [seed["dept_id"]]

    response = client.get(f"{API}/sys/roledata/info", params={"roleId": role_id}, headers=root_headers)
    data = response.json()["data"]
    assert data["roleInfo"]["label"] == "tester"
    assert sorted(data["menus"]) == [1, 2]
    assert data["depts"] == [seed["dept_id"]]


def test_role_info_not_found(client, root_headers):
    response = client.get(f"{API}/sys/roledata/info", params={"roleId": 999}, headers=root_headers)
    assert response.json()["code"] == 10023


def test_update_role_applies_symmetric_difference(client, root_headers, db_session):
    role_id = _add_role(client, root_headers, menus=[1, 2, 3], depts=[10, 11])
    kept_row_ids = set(db_session.execute(
        select(SysRoleMenu.id).where(SysRoleMenu.role_id == role_id, SysRoleMenu.menu_id.in_([2, 3]))
    ).scalars().all())

    assert _update_role(client, root_headers, role_id, [2, 3, 4], [11]).json()["code"] == 200
    assert _menu_ids(db_session, role_id) == [2, 3, 4]
    assert _dept_ids(db_session, role_id) == [11]
    # 未变化的关联行保持不变
    assert kept_row_ids <= set(db_session.execute(
        select(SysRoleMenu.id).where(SysRoleMenu.role_id == role_id)
    ).scalars().all())


def test_update_role_to_and_from_empty_sets(client, root_headers, db_session):
    role_id = _add_role(client, root_headers, menus=[1, 2], depts=[10])

    _update_role(client, root_headers, role_id, [], [])
    assert _menu_ids(db_session, role_id) == []
    assert _dept_ids(db_session, role_id) == []

    _update_role(client, root_headers, role_id, [5], [12])
    assert _menu_ids(db_session, role_id) == [5]
    assert _dept_ids(db_session, role_id) == [12]


def test_update_role_notifies_holders_when_menus_change(client, root_headers, seed, db_session):
    role_id = _add_role(client, root_headers, menus=[1])
    holder = create_user(db_session, "holder01", seed["dept_id"], [role_id])

    with patch("admin_console.modules.system.services.menu_service.sse_manager") as mock_manager:
        _update_role(client, root_headers, role_id, [1, 2], [])
        mock_manager.notice_user_to_update_menus_by_user_ids.assert_any_call([holder.id])


def test_update_role_without_menu_change_does_not_notify_holders(client, root_headers, seed, db_session):
    role_id = _add_role(client, root_headers, menus=[1])
    holder = create_user(db_session, "holder02", seed["dept_id"], [role_id])

    with patch("admin_console.modules.system.services.menu_service.sse_manager") as mock_manager:
        _update_role(client, root_headers, role_id, [1], [seed["dept_id"]])
        calls = mock_manager.notice_user_to_update_menus_by_user_ids.call_args_list
        assert all(call.args[0] != [holder.id] for call in calls)


def test_delete_root_role_is_forbidden(client, root_headers, seed, db_session):
    response = client.post(f"{API}/sys/roledata/delete", json={"roleIds": [seed["root_role_id"]]}, headers=root_headers)
    assert response.json()["code"] == 10016
    assert db_session.get(SysRole, seed["root_role_id"]) is not None


def test_delete_role_with_users(client, root_headers, seed, db_session):
    create_user(db_session, "member01", seed["dept_id"], [seed["staff_role_id"]])
    response = client.post(f"{API}/sys/roledata/delete", json={"roleIds": [seed["staff_role_id"]]}, headers=root_headers)
    assert response.json()["code"] == 10008
    assert db_session.get(SysRole, seed["staff_role_id"]) is not None


def test_delete_role_removes_associations(client, root_headers, seed, db_session):
    role_id = _add_role(client, root_headers, menus=[1, 2], depts=[seed["dept_id"]])

    response = client.post(f"{API}/sys/roledata/delete", json={"roleIds": [role_id]}, headers=root_headers)
    assert response.json()["code"] == 200
    assert db_session.get(SysRole, role_id) is None
    assert _menu_ids(db_session, role_id) == []
    assert _dept_ids(db_session, role_id) == []


def test_add_role_validates_payload(client, root_headers):
    response = client.post(f"{API}/sys/roledata/add", json={"name": "x", "label": "bad label"}, headers=root_headers)
    assert response.status_code == 422
    assert response.json()["code"] == 10000


def test_add_role_with_existing_name_or_label(client, root_headers, seed, db_session):
    response = client.post(f"{API}/sys/roledata/add", json={"name": "普通员工", "label": "other"}, headers=root_headers)
    assert response.status_code == 400
    assert response.json()["code"] == 10024

    response = client.post(f"{API}/sys/roledata/add", json={"name": "其他角色", "label": "staff"}, headers=root_headers)
    assert response.json()["code"] == 10024
    assert db_session.execute(select(SysRole).where(SysRole.name == "其他角色")).scalar_one_or_none() is None


def test_update_role_with_existing_name_or_label(client, root_headers, seed, db_session):
    role_id = _add_role(client, root_headers)
    response = client.post(f"{API}/sys/roledata/update", json={
        "roleId": role_id, "name": "普通员工", "label": "tester"
    }, headers=root_headers)
    assert response.json()["code"] == 10024

    response = client.post(f"{API}/sys/roledata/update", json={
        "roleId": role_id, "name": "测试角色", "label": "staff"
    }, headers=root_headers)
    assert response.json()["code"] == 10024
    assert db_session.get(SysRole, role_id).label == "tester"
