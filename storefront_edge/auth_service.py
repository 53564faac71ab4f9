"""
Pont d'authentification du storefront (Edge Auth Bridge) :
- connexion (/api/auth/login) : échange phone/password avec le Backend API,
  puis émet un jeton de session storefront à côté du jeton Backend,
- inscription client (/api/auth/register),
- profil courant (/api/auth/me) : revalide les deux jetons à chaque appel.

Rien n'est stocké ici : chaque requête est un échange indépendant.
"""
import logging
from functools import wraps

from flask import Blueprint, jsonify, request

from . import backend_client
from .errors import (
    MissingUpstreamCredential,
    NetworkError,
    Unauthenticated,
    UpstreamContractError,
    UpstreamError,
    UpstreamUnauthenticated,
    ValidationError,
)
from .session_tokens import CredentialPair, mint_session_token, verify_session_token

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# ================================
#  Opérations
# ================================

def login(phone, password):
    """Renvoie {user, token, backendToken} ou lève l'erreur correspondante."""
    if not phone or not password:
        raise ValidationError("Phone and password are required")

    result = backend_client.call(
        "POST", "/auth/login", "log in",
        json={"phone": phone, "password": password},
    )

    # Backend : { success: true, data: { user, accessToken, refreshToken } }
    data = backend_client.unwrap(result.payload)
    user = data.get("user") if isinstance(data, dict) else None
    if not user:
        raise UpstreamContractError()

    logger.info("User %s logged in with role %s", user.get("id"), user.get("role"))
    return {
        "user": user,
        "token": mint_session_token(user),
        "backendToken": data.get("accessToken"),
    }


def register(name, phone, email, password, role):
    if not name or not phone or not password or not role:
        raise ValidationError("Name, phone, password, and role are required")

    # Les autres rôles sont gérés par l'administration
    if role != "customer":
        raise ValidationError("Only customers can register. Other roles are managed by admin.")

    try:
        result = backend_client.call(
            "POST", "/auth/register", "register",
            json={"name": name, "phone": phone, "email": email, "password": password, "role": role},
        )
    except NetworkError:
        raise NetworkError("Registration service is currently unavailable. Please try again later.", 503)

    payload = backend_client.unwrap(result.payload)
    if not isinstance(payload, dict):
        raise UpstreamContractError()
    user = payload.get("user", payload)
    if not isinstance(user, dict) or not user.get("id"):
        raise UpstreamContractError()

    response = {
        "user": user,
        "token": mint_session_token(user),
        "message": "Account created successfully",
    }
    if payload.get("accessToken"):
        response["backendToken"] = payload["accessToken"]
    return response


def resolve_session(credentials):
    """
    Qui appelle, et peut-on agir en son nom côté Backend ?
    Un jeton storefront valide ne suffit jamais : le jeton Backend doit
    aussi être présenté, et il est revalidé par le Backend à chaque appel.
    """
    if not credentials.session:
        raise Unauthenticated("No token provided")

    verify_session_token(credentials.session)

    if not credentials.backend:
        raise MissingUpstreamCredential()

    try:
        result = backend_client.call(
            "GET", "/auth/profile", "fetch user data",
            authorization=f"Bearer {credentials.backend}",
        )
    except UpstreamError as e:
        raise UpstreamUnauthenticated(e.status_code, "Failed to fetch user data")

    return backend_client.unwrap(result.payload)


# ================================
#  Décorateur d'authentification
# ================================

def require_session(func):
    """
    Résout l'utilisateur à partir des deux jetons de la requête courante.
    Décorateur réutilisable pour protéger n'importe quelle route.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        user = resolve_session(CredentialPair.from_headers(request.headers))
        return func(user, *args, **kwargs)

    return wrapper


# ================================
#  ROUTES
# ================================

@auth_bp.route("/login", methods=["POST"])
def login_route():
    data = request.get_json(silent=True) or {}
    return jsonify(login(data.get("phone"), data.get("password"))), 200


@auth_bp.route("/register", methods=["POST"])
def register_route():
    data = request.get_json(silent=True) or {}
    return jsonify(register(
        data.get("name"),
        data.get("phone"),
        data.get("email"),
        data.get("password"),
        data.get("role"),
    )), 200


@auth_bp.route("/me", methods=["GET"])
@require_session
def me(user):
    """Profil courant, tel que renvoyé par le Backend."""
    return jsonify(user), 200
