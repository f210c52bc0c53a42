# giftpool/services/google_oauth.py

from urllib.parse import urlencode

import requests

from giftpool.core.config import settings


class GoogleOAuthClient:
    def __init__(self, client_id, client_secret, redirect_uri,
                 auth_url=settings.GOOGLE_AUTH_URL,
                 token_url=settings.GOOGLE_TOKEN_URL,
                 userinfo_url=settings.GOOGLE_USERINFO_URL,
                 timeout=settings.GOOGLE_HTTP_TIMEOUT):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.redirect_uri)

    def get_authorize_url(self) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
        }
        return f"{self.auth_url}?{urlencode(params)}"

    def exchange_code_for_token(self, code: str) -> dict:
        """
        Trade the authorization code for Google tokens.
        """
        token_data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }
        response = requests.post(self.token_url, data=token_data, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_user_info(self, access_token: str) -> dict:
        """
        email / name / picture of the signed-in Google account.
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        response = requests.get(self.userinfo_url, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


google_client = GoogleOAuthClient(
    settings.GOOGLE_CLIENT_ID,
    settings.GOOGLE_CLIENT_SECRET,
    settings.OAUTH_CALLBACK_URL,
)
