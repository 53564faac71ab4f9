"""
Commandes, adresses et frais de livraison.

La règle de calcul des frais vit uniquement dans le Backend API : l'aperçu
panier, le checkout et l'administration appellent tous
`calculate_delivery_fee`, qui délègue au Backend. Aucune copie locale.
"""
import math
from numbers import Real

from flask import Blueprint, jsonify, request

from . import backend_client
from .errors import ValidationError
from .gateway import forward

orders_bp = Blueprint("orders", __name__)


# --- Opérations ---

def validate_order_amount(order_amount):
    if isinstance(order_amount, bool) or not isinstance(order_amount, Real):
        raise ValidationError("orderAmount must be a number")
    if not math.isfinite(order_amount) or order_amount < 0:
        raise ValidationError("orderAmount must be a non-negative number")
    return order_amount


def calculate_delivery_fee(order_amount):
    """Renvoie {deliveryFee, isFree, reason} tel que décidé par le Backend."""
    validate_order_amount(order_amount)
    result = backend_client.call(
        "POST", "/public/settings/delivery/calculate", "calculate delivery fee",
        json={"orderAmount": order_amount},
    )
    return backend_client.unwrap(result.payload)


def fetch_orders(backend_token, params=None):
    """Commandes du client, pour les pages du storefront."""
    result = backend_client.call(
        "GET", "/orders", "fetch orders",
        params=params,
        authorization=f"Bearer {backend_token}",
    )
    return backend_client.unwrap(result.payload)


# ==================================================
#  PARAMÈTRES DE LIVRAISON
# ==================================================
@orders_bp.route("/api/v1/settings/delivery", methods=["GET"])
def get_delivery_settings():
    return forward("GET", "/settings/delivery", "fetch delivery settings", unwrap=True)


@orders_bp.route("/api/v1/settings/delivery", methods=["PATCH"])
def update_delivery_settings():
    return forward("PATCH", "/settings/delivery", "update delivery settings")


@orders_bp.route("/api/public/settings/delivery/calculate", methods=["POST"])
def calculate_delivery():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "orderAmount" not in data:
        raise ValidationError("orderAmount is required")
    return jsonify(calculate_delivery_fee(data["orderAmount"])), 200


# ==================================================
#  COMMANDES
# ==================================================
@orders_bp.route("/api/v1/orders", methods=["GET"])
def list_orders():
    return forward("GET", "/orders", "fetch orders", auth_required=True)


@orders_bp.route("/api/v1/orders", methods=["POST"])
def create_order():
    # Les frais éventuellement calculés côté client passent tels quels ;
    # le Backend recalcule et fait foi.
    return forward("POST", "/orders", "create order")


# ==================================================
#  ADRESSES
# ==================================================
@orders_bp.route("/api/v1/orders/addresses", methods=["GET"])
def get_addresses():
    return forward("GET", "/orders/addresses", "fetch addresses", auth_required=True)


@orders_bp.route("/api/v1/orders/addresses", methods=["POST"])
def create_address():
    return forward("POST", "/orders/addresses", "create address")
