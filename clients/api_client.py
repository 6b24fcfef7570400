"""
HTTP client for the SketchWink auth endpoints.

Thin wrapper: builds JSON requests, maps HTTP outcomes onto typed auth errors,
and parses bodies into pydantic models. Makes no decisions about session state.
"""

import json
import logging

import pydantic
import requests

from auth.config import AuthConfig
from auth.exceptions import BackendError, InvalidCredentialsError, TransportError
from auth.types import (
    ApiErrorBody,
    EmailRequest,
    ResendOtpResponse,
    ResetPasswordRequest,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    SocialSignInRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
    WireModel,
)

logger = logging.getLogger(__name__)


class AuthApiClient:
    """Auth API calls over HTTP(S) JSON."""

    def __init__(self, config: AuthConfig):
        """
        Raises:
            ValueError: If the base URL is empty
        """
        if not config.api_base_url:
            raise ValueError("api_base_url is required")

        self.base_url = config.api_base_url.rstrip("/")
        self.timeout = config.request_timeout_seconds
        self.endpoints = config.endpoints

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _post(self, path: str, body: WireModel) -> dict | None:
        """
        POST body as JSON and return the decoded response.

        Returns:
            Decoded JSON object, or None for an empty 2xx body.

        Raises:
            InvalidCredentialsError: HTTP 401
            BackendError: Other non-2xx with a readable error body
            TransportError: Connection failure, timeout, or unreadable response
        """
        url = self._url(path)

        try:
            response = requests.post(
                url,
                json=body.to_wire(),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Auth API request to {path} failed: {e}")
            raise TransportError() from e

        status = response.status_code
        data = None
        if response.content:
            try:
                data = response.json()
            except (json.JSONDecodeError, ValueError):
                data = None

        if 200 <= status < 300:
            if response.content and not isinstance(data, dict):
                logger.error(f"Auth API {path} returned unreadable body (HTTP {status})")
                raise TransportError(status_code=status)
            return data

        error_message = None
        if isinstance(data, dict):
            try:
                error_message = ApiErrorBody.model_validate(data).user_message
            except pydantic.ValidationError:
                error_message = None

        if status == 401:
            logger.info(f"Auth API {path} rejected credentials")
            if error_message:
                raise InvalidCredentialsError(error_message)
            raise InvalidCredentialsError()

        if error_message:
            logger.warning(f"Auth API {path} returned HTTP {status}: {error_message}")
            raise BackendError(error_message, status_code=status)

        logger.error(f"Auth API {path} returned HTTP {status} without error body")
        raise TransportError(status_code=status)

    def _parse(self, model: type[WireModel], data: dict | None, path: str):
        try:
            return model.model_validate(data or {})
        except pydantic.ValidationError as e:
            logger.error(f"Auth API {path} response did not match {model.__name__}: {e}")
            raise TransportError(status_code=200) from e

    def sign_in(self, email: str, password: str) -> SignInResponse:
        path = self.endpoints.sign_in
        data = self._post(path, SignInRequest(email=email, password=password))
        return self._parse(SignInResponse, data, path)

    def sign_up(
        self, email: str, password: str, name: str, language: str | None = None
    ) -> SignUpResponse:
        path = self.endpoints.sign_up
        data = self._post(
            path,
            SignUpRequest(email=email, password=password, name=name, language=language),
        )
        return self._parse(SignUpResponse, data, path)

    def verify_otp(self, email: str, code: str) -> VerifyOtpResponse:
        path = self.endpoints.verify_otp
        data = self._post(path, VerifyOtpRequest(email=email, code=code))
        return self._parse(VerifyOtpResponse, data, path)

    def resend_otp(self, email: str) -> ResendOtpResponse:
        path = self.endpoints.resend_otp
        data = self._post(path, EmailRequest(email=email))
        return self._parse(ResendOtpResponse, data, path)

    def request_password_reset(self, email: str) -> None:
        self._post(self.endpoints.forgot_password, EmailRequest(email=email))

    def reset_password(self, email: str, code: str, new_password: str) -> None:
        self._post(
            self.endpoints.reset_password,
            ResetPasswordRequest(email=email, code=code, new_password=new_password),
        )

    def social_sign_in(self, request: SocialSignInRequest) -> SignInResponse:
        path = self.endpoints.social_sign_in
        data = self._post(path, request)
        return self._parse(SignInResponse, data, path)
