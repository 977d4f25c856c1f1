import logging
from unittest.mock import patch

import redis

from admin_console.modules.system.constants import AdminCacheKey
from admin_console.modules.system.models.user import SysUser
from admin_console.modules.system.services.user_service import UserService, fold_user_rows


def _user(user_id, username):
    return SysUser(id=user_id, department_id=1, name=username, username=username, status=1)


def test_fold_user_rows_groups_roles_per_user():
    alice, bob, carol = _user(1, "alice"), _user(2, "bob"), _user(3, "carol")
    rows = [
        (alice, "总部", "管理员"),
        (bob, "分部", None),
        (alice, "总部", "审计员"),
        (carol, None, "访客"),
    ]

    records = fold_user_rows(rows)
    assert [record.id for record in records] == [1, 2, 3]
    assert records[0].role_names == ["管理员", "审计员"]
    assert records[0].department_name == "总部"
    assert records[1].role_names == []
    assert records[2].department_name is None


def test_fold_user_rows_empty():
    assert fold_user_rows([]) == []


def test_upgrade_password_version_only_when_online(fake_redis):
    assert UserService.upgrade_password_version(7) is None
    assert not fake_redis.exists(AdminCacheKey.password_version(7))

    fake_redis.set(AdminCacheKey.password_version(7), 1)
    assert UserService.upgrade_password_version(7) == 2
    assert fake_redis.get(AdminCacheKey.password_version(7)) == "2"


def test_upgrade_password_version_logs_redis_failure(fake_redis, caplog):
    fake_redis.set(AdminCacheKey.password_version(7), 1)
    with patch.object(fake_redis, "eval", side_effect=redis.RedisError("connection lost")), \
            caplog.at_level(logging.ERROR):
        assert UserService.upgrade_password_version(7) is None
    assert "密码版本号更新失败" in caplog.text
    assert fake_redis.get(AdminCacheKey.password_version(7)) == "1"


def test_multi_forbidden_drops_all_keys(fake_redis):
    for uid in (1, 2):
        for key in AdminCacheKey.user_keys(uid):
            fake_redis.set(key, "x")
    fake_redis.set(AdminCacheKey.token(3), "x")

    UserService.multi_forbidden([1, 2])
    assert list(fake_redis.store) == [AdminCacheKey.token(3)]


def test_user_info_list_and_role_ids(seed, db_session):
    from admin_console.modules.system.services.role_service import RoleService
    from tests.conftest import create_user

    user = create_user(db_session, "staffuser1", seed["dept_id"], [seed["staff_role_id"]])
    infos = UserService.get_user_info_list(db_session, [seed["root_user_id"], user.id])
    assert sorted(info.username for info in infos) == ["rootadmin", "staffuser1"]
    assert RoleService.get_role_id_by_user(db_session, user.id) == [seed["staff_role_id"]]
