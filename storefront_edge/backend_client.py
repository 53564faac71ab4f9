"""
Client unique vers le Backend API.

Tous les appels sortants passent par `call` : mêmes en-têtes, même
traduction des erreurs, pas de retry ni de timeout propre (ceux de requests
s'appliquent). Un échec amont est un échec de la requête, remonté tout de suite.
"""
import logging
from collections import namedtuple

import requests
from flask import current_app

from . import config
from .errors import NetworkError, UpstreamContractError, UpstreamError

logger = logging.getLogger(__name__)

UpstreamResponse = namedtuple("UpstreamResponse", ["status_code", "payload"])


def upstream_url(path):
    return f"{current_app.config['BACKEND_URL'].rstrip('/')}{config.API_PREFIX}{path}"


def unwrap(payload):
    """
    Normalise l'enveloppe {success, data} du Backend.
    Le Backend répond tantôt enveloppé, tantôt brut : on ne fait ce test qu'ici.
    """
    if isinstance(payload, dict) and payload.get("success") and "data" in payload:
        return payload["data"]
    return payload


def error_message(response):
    """Message d'erreur amont : JSON {message|error}, sinon synthétisé depuis le code."""
    fallback = f"Backend responded with status: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or fallback
    return fallback


def call(method, path, action, params=None, json=None, data=None, authorization=None, network_status=500):
    """
    Appelle le Backend API et renvoie un UpstreamResponse.

    `action` décrit l'opération ("fetch orders") pour le message générique
    des erreurs réseau. Lève UpstreamError avec le code amont si la réponse
    n'est pas 2xx.
    """
    headers = {"Content-Type": "application/json"}
    if authorization:
        headers["Authorization"] = authorization

    try:
        response = requests.request(
            method,
            upstream_url(path),
            params=params,
            json=json,
            data=data,
            headers=headers,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("Backend unreachable for %s %s: %s", method, path, type(e).__name__)
        raise NetworkError(f"Failed to {action}", network_status)

    if not response.ok:
        message = error_message(response)
        logger.info("Backend rejected %s %s with %s", method, path, response.status_code)
        raise UpstreamError(response.status_code, message)

    if not response.content:
        return UpstreamResponse(response.status_code, None)

    try:
        payload = response.json()
    except ValueError:
        raise UpstreamContractError()
    return UpstreamResponse(response.status_code, payload)
