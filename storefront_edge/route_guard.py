"""
Garde des pages à accès restreint.

La décision est recalculée à chaque requête à partir de l'utilisateur courant
et des rôles exigés ; rien n'est mis en cache d'une navigation à l'autre.
"""
from collections import namedtuple
from enum import Enum

ADMIN_ROLES = ("admin", "super_admin")
DEFAULT_LOGIN_PATH = "/auth/login"


class GuardState(Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"


GuardDecision = namedtuple("GuardDecision", ["state", "redirect_to"])


def landing_page_for(role):
    """Page d'accueil selon le rôle : tableau de bord admin, sinon commandes."""
    if role in ADMIN_ROLES:
        return "/admin/dashboard"
    return "/orders"


def evaluate(user, is_loading, required_roles=(), login_path=DEFAULT_LOGIN_PATH):
    if is_loading:
        return GuardDecision(GuardState.LOADING, None)

    if not user:
        return GuardDecision(GuardState.UNAUTHENTICATED, login_path)

    role = user.get("role")
    if required_roles and role not in required_roles:
        return GuardDecision(GuardState.FORBIDDEN, landing_page_for(role))

    return GuardDecision(GuardState.AUTHORIZED, None)


class RouteGuard:
    def __init__(self, required_roles=(), redirect_to=DEFAULT_LOGIN_PATH):
        self.required_roles = tuple(required_roles)
        self.redirect_to = redirect_to

    def decide(self, user, is_loading=False, login_path=None):
        return evaluate(user, is_loading, self.required_roles, login_path or self.redirect_to)


ProtectedRoute = RouteGuard()
SuperAdminRoute = RouteGuard(["super_admin"])
AdminRoute = RouteGuard(ADMIN_ROLES)
CustomerRoute = RouteGuard(["customer"])
