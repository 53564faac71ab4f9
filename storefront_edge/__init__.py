'''Crée l'application Flask du storefront.
Enregistre le pont d'authentification, le proxy des ressources, la passerelle
commandes/livraison et les pages, puis la gestion des erreurs.'''

from flask import Flask
from flask_cors import CORS

from . import config
from .auth_service import auth_bp
from .errors import register_error_handlers
from .gateway import gateway_bp
from .orders_service import orders_bp
from .views import views_bp


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.update(config.as_flask_config())
    if overrides:
        app.config.update(overrides)

    CORS(app, resources={r"/api/*": {"origins": config.CORS_ORIGINS}})

    app.register_blueprint(auth_bp)
    app.register_blueprint(gateway_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(views_bp)
    register_error_handlers(app)
    return app
