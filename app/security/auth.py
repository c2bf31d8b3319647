from functools import wraps

import jwt
from flask import current_app, g, request
from flask_smorest import abort

from ..constants.service_code import ADMIN_ROLES, AUTHENTICATION_MESSAGES
from ..utils.logger import Log


def _decode_bearer_token():
    """
    Decode the bearer token issued by the storefront's auth service.
    Token issuance lives upstream; this service only verifies the signature.
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header or not auth_header.startswith("Bearer "):
        abort(401, message=AUTHENTICATION_MESSAGES["AUTHENTICATION_REQUIRED"])

    token = auth_header.split()[1]
    secret = current_app.config.get("JWT_SECRET") or current_app.config.get("SECRET_KEY")

    try:
        claims = jwt.decode(token, secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        abort(401, message=AUTHENTICATION_MESSAGES["TOKEN_EXPIRED"])
    except jwt.InvalidTokenError:
        abort(401, message=AUTHENTICATION_MESSAGES["INVALID_TOKEN"])

    principal_id = claims.get("id") or claims.get("user_id") or claims.get("sub")
    if not principal_id:
        abort(401, message=AUTHENTICATION_MESSAGES["INVALID_TOKEN"])

    return {
        "id": str(principal_id),
        "role": claims.get("role"),
        "name": claims.get("name"),
        "email": claims.get("email"),
    }


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        principal = _decode_bearer_token()

        if principal.get("role") not in ADMIN_ROLES:
            Log.info(f"[auth.py][admin_required] rejected role={principal.get('role')} id={principal.get('id')}")
            abort(403, message=AUTHENTICATION_MESSAGES["ADMIN_REQUIRED"])

        g.current_admin = principal
        return f(*args, **kwargs)
    return decorated


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        g.current_user = _decode_bearer_token()
        return f(*args, **kwargs)
    return decorated
