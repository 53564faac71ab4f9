"""
Proxy des ressources protégées : relaie les requêtes du storefront vers le
Backend API.
- l'autorisation amont vient du jeton Backend du client, jamais du jeton de
  session storefront,
- query string et corps sont transmis tels quels,
- le code HTTP amont est conservé, en succès comme en erreur.
"""
from flask import Blueprint, jsonify, request

from . import backend_client
from .errors import InvalidSession, MissingUpstreamCredential, Unauthenticated
from .session_tokens import BACKEND_TOKEN_HEADER, bearer_token, is_session_token, verify_session_token

gateway_bp = Blueprint("gateway", __name__)

MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


# ==================================================
#  AUTORISATION AMONT
# ==================================================
def upstream_authorization(auth_required):
    """
    En-tête Authorization à envoyer au Backend, ou None pour une route publique.
    Lève Unauthenticated avant tout appel amont si la route l'exige.
    """
    # Route publique : aucun identifiant n'est relayé ni exigé
    if not auth_required:
        return None

    backend_token = request.headers.get(BACKEND_TOKEN_HEADER)
    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise Unauthenticated()

    if backend_token:
        # Le jeton Backend n'est accepté qu'accompagné d'une session storefront valide
        session_token = bearer_token(auth_header)
        if not session_token:
            raise InvalidSession()
        verify_session_token(session_token)
        return f"Bearer {backend_token}"

    # Un jeton de session storefront n'est jamais une autorisation Backend
    if is_session_token(bearer_token(auth_header)):
        raise MissingUpstreamCredential()

    return auth_header


def forward(method, path, action, auth_required=False, unwrap=False):
    """Relaie la requête courante vers `path` et renvoie la réponse Flask."""
    if method in MUTATING_METHODS:
        auth_required = True

    authorization = upstream_authorization(auth_required)
    body = request.get_data() if method in MUTATING_METHODS else None

    result = backend_client.call(
        method, path, action,
        params=request.query_string.decode() or None,
        data=body or None,
        authorization=authorization,
    )

    if result.payload is None:
        return "", result.status_code

    payload = backend_client.unwrap(result.payload) if unwrap else result.payload
    return jsonify(payload), result.status_code


# ==================================================
#  PRODUITS
# ==================================================
@gateway_bp.route("/api/v1/products", methods=["GET"])
def list_products():
    return forward("GET", "/products", "fetch products")


@gateway_bp.route("/api/v1/products", methods=["POST"])
def create_product():
    return forward("POST", "/products", "create product")


@gateway_bp.route("/api/v1/products/<product_id>", methods=["GET"])
def get_product(product_id):
    return forward("GET", f"/products/{product_id}", "fetch product")


@gateway_bp.route("/api/v1/products/<product_id>", methods=["PUT"])
def update_product(product_id):
    return forward("PUT", f"/products/{product_id}", "update product")


@gateway_bp.route("/api/v1/products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    return forward("DELETE", f"/products/{product_id}", "delete product")


# ==================================================
#  CATÉGORIES (publique)
# ==================================================
@gateway_bp.route("/api/public/categories", methods=["GET"])
def list_categories():
    return forward("GET", "/categories", "fetch categories")


# ==================================================
#  COMMANDES (administration)
# ==================================================
@gateway_bp.route("/api/v1/admin/orders", methods=["GET"])
def list_admin_orders():
    return forward("GET", "/admin/orders", "fetch orders", auth_required=True)
