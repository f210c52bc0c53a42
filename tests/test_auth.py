"""
Auth routes: Google OAuth redirect/callback, dev login and /me.
"""

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from giftpool.common.deps import get_google_client
from giftpool.core.security import decode_access_token
from giftpool.main import app
from giftpool.services.google_oauth import GoogleOAuthClient


class FakeGoogle:
    configured = True

    def __init__(self, user_info=None, fail=False):
        self.user_info = user_info or {}
        self.fail = fail
        self.codes = []

    def get_authorize_url(self):
        return "https://accounts.example/auth?client_id=abc"

    def exchange_code_for_token(self, code):
        self.codes.append(code)
        if self.fail:
            raise requests.HTTPError("400 Client Error")
        return {"access_token": "google-access-token"}

    def get_user_info(self, access_token):
        return self.user_info


@pytest.fixture
def use_google(client):
    def _use(fake):
        app.dependency_overrides[get_google_client] = lambda: fake
        return fake
    return _use


class TestMe:

    def test_returns_current_user_in_camel_case(self, client, giver, auth_headers):
        res = client.get("/api/v1/auth/me", headers=auth_headers(giver))
        assert res.status_code == 200
        body = res.json()
        assert body["id"] == giver.id
        assert body["email"] == "giver@test.com"
        assert body["displayName"] == "Giver"
        assert body["isAdmin"] is False
        assert body["avatarUrl"] is None


class TestDevLogin:

    def test_issues_token_for_known_email(self, client, giver):
        res = client.post("/api/v1/auth/dev-login", json={"email": "giver@test.com"})
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["id"] == giver.id
        assert decode_access_token(body["token"])["id"] == giver.id

    def test_unknown_email(self, client):
        res = client.post("/api/v1/auth/dev-login", json={"email": "nobody@test.com"})
        assert res.status_code == 404
        assert res.json() == {"error": "User not found"}


class TestGoogleLogin:

    def test_not_configured(self, client, use_google):
        fake = FakeGoogle()
        fake.configured = False
        use_google(fake)
        res = client.get("/api/v1/auth/login", follow_redirects=False)
        assert res.status_code == 500
        assert res.json() == {"error": "OAuth not configured"}

    def test_redirects_to_google(self, client, use_google):
        use_google(FakeGoogle())
        res = client.get("/api/v1/auth/login", follow_redirects=False)
        assert res.status_code in (302, 307)
        assert res.headers["location"] == "https://accounts.example/auth?client_id=abc"


class TestGoogleCallback:

    def test_missing_code(self, client, use_google):
        use_google(FakeGoogle())
        res = client.get("/api/v1/auth/callback")
        assert res.status_code == 400
        assert res.json() == {"error": "Missing authorization code"}

    def test_unregistered_user(self, client, use_google):
        use_google(FakeGoogle(user_info={"email": "stranger@test.com"}))
        res = client.get("/api/v1/auth/callback", params={"code": "abc"})
        assert res.status_code == 403
        assert res.json() == {"error": "User not registered. Contact your admin."}

    def test_success_redirects_with_token_and_updates_avatar(self, client, db, giver, use_google):
        fake = use_google(FakeGoogle(user_info={
            "email": "giver@test.com",
            "picture": "https://img.example/giver.png",
        }))
        res = client.get("/api/v1/auth/callback", params={"code": "abc"}, follow_redirects=False)

        assert fake.codes == ["abc"]
        assert res.status_code in (302, 307)
        location = urlparse(res.headers["location"])
        assert location.path == "/auth/callback"
        token = parse_qs(location.query)["token"][0]
        assert decode_access_token(token)["email"] == "giver@test.com"

        db.refresh(giver)
        assert giver.avatar_url == "https://img.example/giver.png"

    def test_upstream_failure(self, client, giver, use_google):
        use_google(FakeGoogle(fail=True))
        res = client.get("/api/v1/auth/callback", params={"code": "abc"})
        assert res.status_code == 500
        assert res.json() == {"error": "Authentication failed"}


class TestGoogleOAuthClient:

    def setup_method(self):
        self.google = GoogleOAuthClient(
            "client-id", "client-secret", "http://localhost:3001/api/v1/auth/callback",
            auth_url="https://accounts.example/auth",
            token_url="https://oauth.example/token",
            userinfo_url="https://oauth.example/userinfo",
        )

    def test_authorize_url(self):
        url = urlparse(self.google.get_authorize_url())
        params = parse_qs(url.query)
        assert url.netloc == "accounts.example"
        assert params["client_id"] == ["client-id"]
        assert params["redirect_uri"] == ["http://localhost:3001/api/v1/auth/callback"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["openid email profile"]

    def test_not_configured_without_client_id(self):
        assert GoogleOAuthClient(None, None, None).configured is False

    @patch("giftpool.services.google_oauth.requests.post")
    def test_exchange_code(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value={"access_token": "t"}))
        assert self.google.exchange_code_for_token("the-code") == {"access_token": "t"}

        args, kwargs = mock_post.call_args
        assert args[0] == "https://oauth.example/token"
        assert kwargs["data"]["code"] == "the-code"
        assert kwargs["data"]["grant_type"] == "authorization_code"
        mock_post.return_value.raise_for_status.assert_called_once()

    @patch("giftpool.services.google_oauth.requests.get")
    def test_get_user_info(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(return_value={"email": "a@b.c"}))
        assert self.google.get_user_info("tok") == {"email": "a@b.c"}
        assert mock_get.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}
