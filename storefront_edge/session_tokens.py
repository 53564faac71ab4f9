"""
Jeton de session storefront (Session Credential) et paire d'identifiants.

Le storefront signe son propre JWT (HS256) pour prouver qu'un client s'est
connecté chez lui. Le jeton du Backend API est transporté à côté, sans jamais
être décodé ni re-signé.
"""
from collections import namedtuple
from datetime import datetime, timezone

from authlib.jose import jwt, JoseError
from flask import current_app

from .errors import ConfigurationError, InvalidSession

BACKEND_TOKEN_HEADER = "X-Backend-Token"


class CredentialPair(namedtuple("CredentialPair", ["session", "backend"])):
    """Les deux identifiants présentés par le client, jamais interchangeables."""

    __slots__ = ()

    @classmethod
    def from_headers(cls, headers):
        return cls(
            session=bearer_token(headers.get("Authorization")),
            backend=headers.get(BACKEND_TOKEN_HEADER) or None,
        )


def bearer_token(auth_header):
    """Extrait <token> de 'Bearer <token>' ; None si absent ou mal formé."""
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def get_jwt_secret():
    secret = current_app.config.get("JWT_SECRET")
    if not secret:
        raise ConfigurationError("JWT_SECRET environment variable is required")
    return secret


def mint_session_token(user, now=None):
    """Signe un jeton {userId, role, phone} valable SESSION_TTL."""
    issued = now or datetime.now(timezone.utc)
    header = {"alg": "HS256"}
    payload = {
        "userId": user.get("id"),
        "role": user.get("role"),
        "phone": user.get("phone"),
        "iat": int(issued.timestamp()),
        "exp": int((issued + current_app.config["SESSION_TTL"]).timestamp()),
    }
    return jwt.encode(header, payload, get_jwt_secret()).decode()


def verify_session_token(token):
    """
    Vérifie signature et expiration du jeton storefront.
    Toute erreur de vérification devient InvalidSession : le client ne voit
    jamais le détail cryptographique.
    """
    secret = get_jwt_secret()
    try:
        claims = jwt.decode(token, secret, claims_options={"exp": {"essential": True}})
        claims.validate()
    except (JoseError, ValueError):
        raise InvalidSession()
    return dict(claims)


def is_session_token(token):
    """Vrai si le jeton a été signé par ce storefront (expiré ou non)."""
    secret = current_app.config.get("JWT_SECRET")
    if not token or not secret:
        return False
    try:
        jwt.decode(token, secret)
    except (JoseError, ValueError):
        return False
    return True
