"""Account use cases."""

from .authenticate import (
    AuthenticateRequest,
    AuthenticateResponse,
    AuthenticateUseCase,
)
from .create_account import (
    CreateAccountRequest,
    CreateAccountResponse,
    CreateAccountUseCase,
)
from .login import LoginRequest, LoginResponse, LoginUseCase
from .logout import LogoutRequest, LogoutResponse, LogoutUseCase

__all__ = [
    "AuthenticateRequest",
    "AuthenticateResponse",
    "AuthenticateUseCase",
    "CreateAccountRequest",
    "CreateAccountResponse",
    "CreateAccountUseCase",
    "LoginRequest",
    "LoginResponse",
    "LoginUseCase",
    "LogoutRequest",
    "LogoutResponse",
    "LogoutUseCase",
]
