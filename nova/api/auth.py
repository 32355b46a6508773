from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from nova.api.deps import get_config
from nova.config.schema import AdminConfig, AppConfig

_basic = HTTPBasic()


def hash_password(password: str, salt: str, iterations: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
    )
    return digest.hex()


@dataclass(frozen=True)
class AdminAuthenticator:
    settings: AdminConfig

    def verify(self, email: str, password: str) -> bool:
        expected = self.settings.password_hash
        if not expected:
            return False
        email_ok = hmac.compare_digest(
            email.strip().lower().encode("utf-8"),
            self.settings.email.strip().lower().encode("utf-8"),
        )
        candidate = hash_password(password, self.settings.salt or "", self.settings.iterations)
        password_ok = hmac.compare_digest(candidate, expected.lower())
        return email_ok and password_ok


def get_authenticator(config: AppConfig = Depends(get_config)) -> AdminAuthenticator:
    return AdminAuthenticator(settings=config.admin)


def require_admin(
    credentials: HTTPBasicCredentials = Depends(_basic),
    authenticator: AdminAuthenticator = Depends(get_authenticator),
) -> str:
    if not authenticator.verify(credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
