"""
业务异常与全局异常处理

业务层统一抛出 ApiException(code)，提示语由 ERROR_CODE_MAP 查表得到；
全局异常处理器将其渲染为 {code, msg, data: null}。
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode:
    """业务错误码"""
    PARAMETER_INVALID = 10000
    USER_EXISTS = 10001
    INVALID_LOGIN = 10003
    ROLE_HAS_USERS = 10008
    DEPT_HAS_USERS = 10009
    DEPT_HAS_ROLES = 10010
    PASSWORD_MISMATCH = 10011
    DEPT_HAS_CHILDREN = 10015
    BUILT_IN_RESOURCE = 10016
    USER_NOT_FOUND = 10017
    USER_DEPT_NOT_FOUND = 10018
    DEPT_NOT_FOUND = 10019
    ROLE_NOT_FOUND = 10023
    ROLE_EXISTS = 10024
    DEPT_PARENT_INVALID = 10025
    LOGIN_INVALID = 11001
    LOGIN_EXPIRED = 11002


ERROR_CODE_MAP = {
    ErrorCode.PARAMETER_INVALID: "参数校验异常",
    ErrorCode.USER_EXISTS: "系统用户已存在",
    ErrorCode.INVALID_LOGIN: "用户名密码有误",
    ErrorCode.ROLE_HAS_USERS: "该角色存在关联用户，请先删除关联用户",
    ErrorCode.DEPT_HAS_USERS: "该部门存在关联用户，请先删除关联用户",
    ErrorCode.DEPT_HAS_ROLES: "该部门存在关联角色，请先删除关联角色",
    ErrorCode.PASSWORD_MISMATCH: "旧密码与原密码不一致",
    ErrorCode.DEPT_HAS_CHILDREN: "该部门存在子部门，请先删除子部门",
    ErrorCode.BUILT_IN_RESOURCE: "系统内置功能不允许操作",
    ErrorCode.USER_NOT_FOUND: "用户不存在",
    ErrorCode.USER_DEPT_NOT_FOUND: "无法查找当前用户所属部门",
    ErrorCode.DEPT_NOT_FOUND: "部门不存在",
    ErrorCode.ROLE_NOT_FOUND: "角色不存在",
    ErrorCode.ROLE_EXISTS: "角色名称或标识已存在",
    ErrorCode.DEPT_PARENT_INVALID: "上级部门不能是部门自身或其下级部门",
    ErrorCode.LOGIN_INVALID: "登录无效或无权限访问",
    ErrorCode.LOGIN_EXPIRED: "登录身份已过期",
}

# 需要返回401的认证类错误码
AUTH_ERROR_CODES = {ErrorCode.LOGIN_INVALID, ErrorCode.LOGIN_EXPIRED}


class ApiException(Exception):
    """
    业务异常

    Args:
        code: 业务错误码
        msg: 自定义提示语，为空时按错误码查表
    """

    def __init__(self, code: int, msg: Optional[str] = None):
        self.code = code
        self.msg = msg or ERROR_CODE_MAP.get(code, "未知错误")
        super().__init__(self.msg)

    @property
    def http_status(self) -> int:
        if self.code in AUTH_ERROR_CODES:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_400_BAD_REQUEST

    def __str__(self) -> str:
        return f"[{self.code}] {self.msg}"


def error_response(code: int, msg: str, http_status: int) -> JSONResponse:
    """构造统一的错误响应"""
    return JSONResponse(
        status_code=http_status,
        content={"code": code, "msg": msg, "data": None}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""

    @app.exception_handler(ApiException)
    async def api_exception_handler(request: Request, exc: ApiException):
        logger.warning(f"业务异常 {request.method} {request.url.path}: {exc}")
        return error_response(exc.code, exc.msg, exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(item) for item in first.get("loc", ()) if item != "body")
            msg = f"{location}: {first.get('msg')}" if location else first.get("msg")
        else:
            msg = ERROR_CODE_MAP[ErrorCode.PARAMETER_INVALID]
        logger.info(f"参数校验失败 {request.method} {request.url.path}: {msg}")
        return error_response(ErrorCode.PARAMETER_INVALID, msg, status.HTTP_422_UNPROCESSABLE_ENTITY)
