"""
Taxonomie des erreurs de la passerelle storefront.

Chaque erreur porte son code HTTP. Les erreurs de saisie et d'identifiants
sont levées localement, avant tout appel au Backend API ; les erreurs
remontées par le Backend conservent leur code et leur message d'origine.
"""
import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class EdgeError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(EdgeError):
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(EdgeError):
    status_code = 401
    default_message = "Authorization header is required"


class InvalidSession(EdgeError):
    status_code = 401
    default_message = "Invalid token"


class MissingUpstreamCredential(EdgeError):
    status_code = 401
    default_message = "Backend token not provided"


class UpstreamError(EdgeError):
    """Réponse non-2xx du Backend API : le code d'origine est conservé."""

    def __init__(self, status_code, message):
        super().__init__(message, status_code)


class UpstreamUnauthenticated(UpstreamError):
    pass


class UpstreamContractError(EdgeError):
    default_message = "Invalid response from backend"


class NetworkError(EdgeError):
    pass


class ConfigurationError(EdgeError):
    pass


# Blueprints qui répondent {"message": ...} ; les autres répondent {"error": ...}
MESSAGE_BLUEPRINTS = {"auth"}


def error_body(message):
    key = "message" if request.blueprint in MESSAGE_BLUEPRINTS else "error"
    return {key: message}


def register_error_handlers(app):
    """Branche la taxonomie sur l'application Flask."""

    @app.errorhandler(EdgeError)
    def handle_edge_error(e):
        if e.status_code >= 500:
            logger.warning("%s on %s %s: %s", type(e).__name__, request.method, request.path, e.message)
        return jsonify(error_body(e.message)), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify(error_body(e.description)), e.code
        if app.debug:
            raise e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error_body("Internal server error")), 500
