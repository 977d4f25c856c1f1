import json

from admin_console.modules.system.constants import AdminCacheKey
from tests.conftest import API, create_user, login


def test_login_writes_session_cache(client, seed, fake_redis):
    response = client.post(f"{API}/auth/login", json={"username": "rootadmin", "password": "123456"})
    assert response.status_code == 200
    body = response.json()
    assert body["code"] == 200
    token = body["data"]["token"]

    uid = seed["root_user_id"]
    assert fake_redis.get(AdminCacheKey.password_version(uid)) == "1"
    assert fake_redis.get(AdminCacheKey.token(uid)) == token
    assert json.loads(fake_redis.get(AdminCacheKey.perms(uid))) == []


def test_login_with_wrong_password(client, seed):
    response = client.post(f"{API}/auth/login", json={"username": "rootadmin", "password": "wrong-pass"})
    assert response.status_code == 400
    assert response.json() == {"code": 10003, "msg": "用户名密码有误", "data": None}


def test_disabled_account_cannot_login(client, seed, db_session):
    create_user(db_session, "disabled01", seed["dept_id"], [seed["staff_role_id"]], status=0)
    response = client.post(f"{API}/auth/login", json={"username": "disabled01", "password": "123456"})
    assert response.json()["code"] == 10003


def test_request_without_token_is_rejected(client, seed):
    response = client.get(f"{API}/sys/roledata/list")
    assert response.status_code == 401
    assert response.json()["code"] == 11001


def test_request_with_garbage_token_is_rejected(client, seed):
    response = client.get(f"{API}/sys/roledata/list", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["code"] == 11001


def test_health_check_is_public(client, seed):
    response = client.get(f"{API}/system/health")
    assert response.status_code == 200
    assert response.json()["services"] == {"database": True, "redis": True}


def test_forbidden_account_token_expires(client, seed, fake_redis):
    headers = login(client, "rootadmin")
    fake_redis.delete(*AdminCacheKey.user_keys(seed["root_user_id"]))

    response = client.get(f"{API}/sys/account/info", headers=headers)
    assert response.status_code == 401
    assert response.json()["code"] == 11002


def test_new_login_replaces_old_token(client, seed):
    old_headers = login(client, "rootadmin")
    new_headers = login(client, "rootadmin")

    assert client.get(f"{API}/sys/account/info", headers=old_headers).json()["code"] == 11002
    assert client.get(f"{API}/sys/account/info", headers=new_headers).json()["code"] == 200
