"""
LinkedIn OAuth and share client.

Wraps the three provider calls the service makes: the authorization-code token
exchange, the OpenID userinfo lookup and the UGC post publish. Every failure is
raised as LinkedInError carrying the HTTP status the caller should relay.
"""
import logging
import urllib.parse
from dataclasses import dataclass
from typing import Optional

import requests

AUTHORIZATION_URL = 'https://www.linkedin.com/oauth/v2/authorization'
TOKEN_URL = 'https://www.linkedin.com/oauth/v2/accessToken'
USERINFO_URL = 'https://api.linkedin.com/v2/userinfo'
UGC_POSTS_URL = 'https://api.linkedin.com/v2/ugcPosts'

DEFAULT_SCOPE = 'openid profile email w_member_social'


class LinkedInError(Exception):
    """A failed provider call. `status_code` is the upstream status, or 500."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class LinkedInMember:
    id: str
    name: Optional[str] = None

    @property
    def urn(self) -> str:
        return f'urn:li:person:{self.id}'


def _error_message(response) -> str:
    """Best-effort extraction of LinkedIn's error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ('error_description', 'message', 'error'):
            if body.get(key):
                return str(body[key])
    return f'LinkedIn request failed with status {response.status_code}'


def _raise_for_status(response, context: str) -> None:
    try:
        response.raise_for_status()
    except requests.HTTPError:
        message = _error_message(response)
        logging.error('[LINKEDIN] %s failed: status=%s %s', context, response.status_code, message)
        raise LinkedInError(message, response.status_code)


def _json(response, context: str) -> dict:
    try:
        data = response.json()
    except ValueError:
        raise LinkedInError(f'{context} returned an unreadable response.')
    if not isinstance(data, dict):
        raise LinkedInError(f'{context} returned an unexpected response.')
    return data


class LinkedInClient:
    def __init__(self, client_id: str, client_secret: str, redirect_uri: str,
                 scope: str = DEFAULT_SCOPE, timeout: float = 10.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        query = urllib.parse.urlencode({
            'response_type': 'code',
            'client_id': self.client_id,
            'redirect_uri': self.redirect_uri,
            'scope': self.scope,
            'state': state,
        }, quote_via=urllib.parse.quote)
        return f'{AUTHORIZATION_URL}?{query}'

    def exchange_code(self, code: str) -> dict:
        """Trade an authorization code for `{access_token, expires_in}`."""
        params = {
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': self.redirect_uri,
            'client_id': self.client_id,
            'client_secret': self.client_secret,
        }
        try:
            response = requests.post(TOKEN_URL, data=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise LinkedInError(str(e))
        _raise_for_status(response, 'Token exchange')
        data = _json(response, 'Token exchange')
        if not data.get('access_token'):
            raise LinkedInError('Token exchange did not return an access token.')
        return {'access_token': data['access_token'], 'expires_in': data.get('expires_in')}

    def fetch_member(self, access_token: str) -> LinkedInMember:
        """Look up the member that owns `access_token`."""
        try:
            response = requests.get(
                USERINFO_URL,
                headers={'Authorization': f'Bearer {access_token}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LinkedInError(str(e))
        _raise_for_status(response, 'User lookup')
        data = _json(response, 'User lookup')
        member_id = data.get('sub') or data.get('id')
        if not member_id:
            raise LinkedInError('Invalid LinkedIn user information.')
        return LinkedInMember(id=str(member_id), name=data.get('name'))

    def publish_text(self, access_token: str, author_urn: str, text: str) -> Optional[str]:
        """Publish a public text-only post. Returns the new post id when LinkedIn reports one."""
        payload = {
            'author': author_urn,
            'lifecycleState': 'PUBLISHED',
            'specificContent': {
                'com.linkedin.ugc.ShareContent': {
                    'shareCommentary': {'text': text},
                    'shareMediaCategory': 'NONE',
                },
            },
            'visibility': {'com.linkedin.ugc.MemberNetworkVisibility': 'PUBLIC'},
        }
        try:
            response = requests.post(
                UGC_POSTS_URL,
                json=payload,
                headers={
                    'Authorization': f'Bearer {access_token}',
                    'Content-Type': 'application/json',
                    'X-Restli-Protocol-Version': '2.0.0',
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LinkedInError(str(e))
        _raise_for_status(response, 'Share publish')
        return response.headers.get('x-restli-id')

    def share(self, access_token: str, message: str) -> Optional[str]:
        member = self.fetch_member(access_token)
        return self.publish_text(access_token, member.urn, message)
