# storefront_edge/views.py
"""
Pages du storefront rendues côté serveur.

Les deux jetons obtenus à la connexion sont gardés dans la session Flask ;
chaque page protégée revalide l'utilisateur via resolve_session puis laisse
la garde de route décider : afficher, rediriger, ou attendre.
"""
import logging
from functools import wraps

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for

from .auth_service import login, resolve_session
from .errors import (
    ConfigurationError,
    EdgeError,
    InvalidSession,
    MissingUpstreamCredential,
    NetworkError,
    Unauthenticated,
    UpstreamContractError,
    UpstreamUnauthenticated,
)
from .orders_service import calculate_delivery_fee, fetch_orders
from .route_guard import AdminRoute, CustomerRoute, GuardState, ProtectedRoute, SuperAdminRoute, landing_page_for
from .session_tokens import CredentialPair

views_bp = Blueprint("views", __name__)
logger = logging.getLogger(__name__)

SESSION_KEYS = ("auth_token", "backend_token")


# ==========================
# 🔧 UTILITAIRES
# ==========================

def clear_session():
    for key in SESSION_KEYS:
        session.pop(key, None)


def current_user():
    """
    Renvoie (user, is_loading).
    is_loading est vrai quand le Backend ne peut pas trancher (injoignable ou
    en erreur) : on ne sait pas encore si l'utilisateur est connecté.
    """
    if not session.get("auth_token"):
        return None, False

    credentials = CredentialPair(session.get("auth_token"), session.get("backend_token"))
    try:
        user = resolve_session(credentials)
    except NetworkError:
        return None, True
    except UpstreamUnauthenticated as e:
        if e.status_code >= 500:
            return None, True
        clear_session()
        return None, False
    except (Unauthenticated, InvalidSession, MissingUpstreamCredential):
        clear_session()
        return None, False

    # Profil illisible : même traitement qu'une session rejetée
    if not isinstance(user, dict):
        clear_session()
        return None, False
    return user, False


def guarded(guard):
    """Protège une page avec une RouteGuard ; la vue reçoit l'utilisateur résolu."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                user, is_loading = current_user()
            except (UpstreamContractError, ConfigurationError) as e:
                logger.error("Page %s unavailable: %s", request.path, e.message)
                return render_template("error.html", error=e.message), e.status_code
            decision = guard.decide(user, is_loading, current_app.config["LOGIN_PATH"])

            if decision.state is GuardState.LOADING:
                return render_template("loading.html")
            if decision.state is not GuardState.AUTHORIZED:
                return redirect(decision.redirect_to)
            return func(user, *args, **kwargs)

        return wrapper

    return decorator


# ==========================
# 1️⃣ PAGE DE CONNEXION
# ==========================
@views_bp.route("/auth/login", methods=["GET", "POST"])
def login_page():
    if request.method == "POST":
        phone = request.form.get("phone")
        password = request.form.get("password")

        try:
            result = login(phone, password)
        except EdgeError as e:
            return render_template("login.html", error=e.message)

        session["auth_token"] = result["token"]
        session["backend_token"] = result["backendToken"]
        return redirect(landing_page_for(result["user"].get("role")))

    return render_template("login.html")


@views_bp.route("/auth/logout")
def logout_page():
    clear_session()
    return redirect(current_app.config["LOGIN_PATH"])


# ==========================
# 2️⃣ PAGES PROTÉGÉES
# ==========================
@views_bp.route("/orders")
@guarded(ProtectedRoute)
def orders_page(user):
    try:
        orders = fetch_orders(session["backend_token"], request.query_string.decode() or None)
    except EdgeError as e:
        return render_template("orders.html", user=user, orders=[], error=e.message)
    # Liste brute ou page {orders, total}
    if isinstance(orders, dict):
        orders = orders.get("orders") or []
    return render_template("orders.html", user=user, orders=orders or [])


@views_bp.route("/admin/dashboard")
@guarded(AdminRoute)
def admin_dashboard(user):
    return render_template("dashboard.html", user=user)


@views_bp.route("/super-admin")
@guarded(SuperAdminRoute)
def super_admin_page(user):
    return render_template("dashboard.html", user=user, super_admin=True)


@views_bp.route("/checkout")
@guarded(CustomerRoute)
def checkout_page(user):
    """Aperçu des frais de livraison pour le sous-total du panier."""
    amount = request.args.get("amount", type=float)
    if amount is None:
        return render_template("checkout.html", user=user, amount=None, delivery=None)

    try:
        delivery = calculate_delivery_fee(amount)
    except EdgeError as e:
        return render_template("checkout.html", user=user, amount=amount, delivery=None, error=e.message)
    return render_template("checkout.html", user=user, amount=amount, delivery=delivery)


# ==========================
# 3️⃣ ROUTE PAR DÉFAUT
# ==========================
@views_bp.route("/")
def index():
    return redirect(url_for("views.login_page"))
