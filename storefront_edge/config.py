"""
Configuration de la passerelle storefront, lue depuis l'environnement.

Un fichier .env local est chargé s'il existe. Les valeurs sont recopiées
dans app.config au démarrage pour que les tests puissent les surcharger.
"""
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

# --- URL du Backend API ---
BACKEND_URL = os.environ.get("BACKEND_URL", "http://localhost:3001")
API_PREFIX = "/api/v1"

# --- Session storefront ---
JWT_SECRET = os.environ.get("JWT_SECRET")
SESSION_TTL = timedelta(days=int(os.environ.get("SESSION_TTL_DAYS", "7")))

# --- Pages ---
FLASK_SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-storefront-session-key")
LOGIN_PATH = os.environ.get("LOGIN_PATH", "/auth/login")

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
PORT = int(os.environ.get("PORT", "3000"))


def as_flask_config():
    return {
        "BACKEND_URL": BACKEND_URL,
        "JWT_SECRET": JWT_SECRET,
        "SESSION_TTL": SESSION_TTL,
        "SECRET_KEY": FLASK_SECRET_KEY,
        "LOGIN_PATH": LOGIN_PATH,
    }
