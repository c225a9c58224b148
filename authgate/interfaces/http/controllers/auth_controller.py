# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authgate.application.services.session_guard import SessionGuard
from authgate.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.domain.users.entities import IssuedToken, User
from authgate.infrastructure.audit import AuditAction, audit_log
from authgate.interfaces.http.credentials import CookieCredentialTransport
from authgate.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    CurrentUserDTO,
    LoginRequestDTO,
    MessageDTO,
    RegisterRequestDTO,
    UserEnvelopeDTO,
    UserPublicDTO,
)
from authgate.interfaces.http.guard import current_user, require_session
from authgate.shared.errors import AppError
from authgate.shared.errors.validation import raise_validation_error
from authgate.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _user_envelope(user: User) -> UserEnvelopeDTO:
    return UserEnvelopeDTO(user=UserPublicDTO.model_validate(user))


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        get_current_user_use_case: GetCurrentUserUseCase,
        guard: SessionGuard,
        transport: CookieCredentialTransport,
        url_prefix: str = "/auth",
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._get_current_user_use_case = get_current_user_use_case
        self._guard = guard
        self._transport = transport
        self._url_prefix = url_prefix

    def _issue_response(self, user: User, issued: IssuedToken, status: HTTPStatus) -> tuple[Response, int]:
        payload = AuthSuccessDTO(token=issued.token, data=_user_envelope(user))
        response = jsonify(payload.model_dump(mode="json", by_alias=True))
        self._transport.attach(response, issued)
        return response, status

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, issued = self._register_use_case.execute(dto.username, dto.email, dto.password)

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"username": dto.username},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return self._issue_response(user, issued, HTTPStatus.CREATED)

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            user, issued = self._login_use_case.execute(dto.email, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                user_id=None,
                ip_address=ip_address,
                details={"reason": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            success=True,
        )
        logger.info(f"auth.login: ok user_id={user.id}")
        return self._issue_response(user, issued, HTTPStatus.OK)

    def logout(self) -> tuple[Response, int]:
        user = current_user()
        payload = MessageDTO(message="Logged out successfully")
        response = jsonify(payload.model_dump())
        # The token itself stays valid until it expires; only the cookie goes.
        self._transport.clear(response)

        audit_log(
            AuditAction.LOGOUT,
            user_id=user.id,
            ip_address=_get_client_ip(),
            success=True,
        )
        logger.info(f"auth.logout: ok user_id={user.id}")
        return response, HTTPStatus.OK

    def me(self) -> tuple[Response, int]:
        user = self._get_current_user_use_case.execute(current_user().id)
        payload = CurrentUserDTO(data=_user_envelope(user))
        return jsonify(payload.model_dump(mode="json", by_alias=True)), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        guarded = require_session(self._guard)
        bp = Blueprint("auth", __name__, url_prefix=self._url_prefix)
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/logout", endpoint="logout", view_func=guarded(self.logout), methods=["POST"]
        )
        bp.add_url_rule("/me", endpoint="me", view_func=guarded(self.me), methods=["GET"])
        return bp
