"""Shared fixtures: storefront app, test client, and a recording fake Backend API.

The fake replaces `requests.request` inside `storefront_edge.backend_client`,
so every upstream call is captured in `backend.calls` and nothing leaves the
process.
"""
import json
import time
from collections import namedtuple
from datetime import timedelta
from unittest.mock import patch

import pytest
import requests
from authlib.jose import jwt

from storefront_edge import create_app

BACKEND_URL = "http://backend.test"
UPSTREAM_PREFIX = f"{BACKEND_URL}/api/v1"
SECRET = "storefront-secret-for-tests-only"

UpstreamCall = namedtuple("UpstreamCall", ["method", "path", "kwargs"])


def make_response(status, body=None, raw=None):
    response = requests.Response()
    response.status_code = status
    if body is not None:
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = raw or b""
    return response


class FakeBackend:
    """Routes (method, path) to canned responses or handlers, records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, status=200, body=None, raw=None, handler=None, error=None):
        self.routes[(method, path)] = (status, body, raw, handler, error)

    def __call__(self, method, url, **kwargs):
        path = url[len(UPSTREAM_PREFIX):]
        self.calls.append(UpstreamCall(method, path, kwargs))

        if (method, path) not in self.routes:
            return make_response(404, {"message": f"Cannot {method} {path}"})

        status, body, raw, handler, error = self.routes[(method, path)]
        if error is not None:
            raise error
        if handler is not None:
            status, body = handler(kwargs)
        return make_response(status, body, raw)

    def last(self):
        return self.calls[-1]


@pytest.fixture
def app():
    return create_app({
        "TESTING": True,
        "BACKEND_URL": BACKEND_URL,
        "JWT_SECRET": SECRET,
        "SECRET_KEY": "pages-secret-for-tests",
        "SESSION_TTL": timedelta(days=7),
        "LOGIN_PATH": "/auth/login",
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend():
    fake = FakeBackend()
    with patch("storefront_edge.backend_client.requests.request", new=fake):
        yield fake


def make_session_token(user_id="u1", role="customer", phone="03001234567", exp=None, secret=SECRET):
    """Helper: a storefront session token signed like the auth bridge signs them."""
    now = int(time.time())
    payload = {
        "userId": user_id,
        "role": role,
        "phone": phone,
        "iat": now,
        "exp": exp or now + 3600,
    }
    return jwt.encode({"alg": "HS256"}, payload, secret).decode()


def both_tokens(session_token=None, backend_token="bt1"):
    """Headers carrying the storefront session and the Backend token."""
    headers = {"Authorization": f"Bearer {session_token or make_session_token()}"}
    if backend_token:
        headers["X-Backend-Token"] = backend_token
    return headers
