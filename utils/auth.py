# utils/auth.py
from typing import Optional

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

TOKEN_SALT = "admin-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(admin) -> str:
    return _serializer().dumps({"admin_id": admin.id, "mobile_no": admin.mobile_no})


def read_token(token: str) -> Optional[dict]:
    try:
        return _serializer().loads(
            token, max_age=current_app.config["TOKEN_MAX_AGE_SECONDS"]
        )
    except (SignatureExpired, BadSignature):
        return None

