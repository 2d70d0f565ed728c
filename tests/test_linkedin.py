from unittest.mock import patch
from urllib.parse import urlparse, parse_qs

import pytest
import requests

from linkedin import LinkedInClient, LinkedInError, TOKEN_URL, USERINFO_URL, UGC_POSTS_URL


def _login_state(app_client):
    """Hit the login route and return the state LinkedIn would echo back."""
    r = app_client.get('/linkedin/login')
    assert r.status_code == 302
    query = parse_qs(urlparse(r.headers['Location']).query)
    return query['state'][0]


def test_login_redirects_to_linkedin(app_client, settings):
    r = app_client.get('/linkedin/login')
    assert r.status_code == 302
    location = urlparse(r.headers['Location'])
    assert location.netloc == 'www.linkedin.com'
    assert location.path == '/oauth/v2/authorization'
    query = parse_qs(location.query)
    assert query['response_type'] == ['code']
    assert query['client_id'] == [settings.linkedin_client_id]
    assert query['redirect_uri'] == [settings.linkedin_redirect_uri]
    assert query['scope'] == ['openid profile email w_member_social']
    assert query['state'][0]


def test_login_state_is_random_per_request(app_client):
    assert _login_state(app_client) != _login_state(app_client)


@patch('linkedin.requests.post')
def test_callback_without_code_makes_no_call(mock_post, app_client):
    r = app_client.get('/linkedin/callback')
    assert r.status_code == 400
    assert r.get_json() == {'error': 'Authorization code is missing.'}
    mock_post.assert_not_called()


@patch('linkedin.requests.post')
def test_callback_provider_error_param(mock_post, app_client):
    r = app_client.get('/linkedin/callback?error=user_cancelled_login&error_description=The+user+cancelled')
    assert r.status_code == 400
    assert r.get_json() == {'error': 'The user cancelled'}
    mock_post.assert_not_called()


@patch('linkedin.requests.post')
def test_callback_rejects_bad_state(mock_post, app_client):
    _login_state(app_client)
    r = app_client.get('/linkedin/callback?code=abc&state=forged')
    assert r.status_code == 400
    assert r.get_json() == {'error': 'Invalid OAuth state.'}
    mock_post.assert_not_called()


@patch('linkedin.requests.post')
def test_callback_rejects_state_without_login(mock_post, app_client):
    r = app_client.get('/linkedin/callback?code=abc&state=anything')
    assert r.status_code == 400
    mock_post.assert_not_called()


@patch('linkedin.requests.post')
def test_callback_exchanges_code(mock_post, app_client, settings, fake_response):
    mock_post.return_value = fake_response(200, {'access_token': 'tok-1', 'expires_in': 5184000, 'scope': 'x'})
    state = _login_state(app_client)
    r = app_client.get(f'/linkedin/callback?code=abc&state={state}')
    assert r.status_code == 200
    assert r.get_json() == {'access_token': 'tok-1', 'expires_in': 5184000}

    args, kwargs = mock_post.call_args
    assert args[0] == TOKEN_URL
    assert kwargs['data'] == {
        'grant_type': 'authorization_code',
        'code': 'abc',
        'redirect_uri': settings.linkedin_redirect_uri,
        'client_id': settings.linkedin_client_id,
        'client_secret': settings.linkedin_client_secret,
    }


@patch('linkedin.requests.post')
def test_callback_state_is_single_use(mock_post, app_client, fake_response):
    mock_post.return_value = fake_response(200, {'access_token': 'tok-1', 'expires_in': 60})
    state = _login_state(app_client)
    assert app_client.get(f'/linkedin/callback?code=abc&state={state}').status_code == 200
    assert app_client.get(f'/linkedin/callback?code=abc&state={state}').status_code == 400
    assert mock_post.call_count == 1


@patch('linkedin.requests.post')
def test_callback_relays_upstream_status(mock_post, app_client, fake_response):
    mock_post.return_value = fake_response(401, {'error': 'invalid_request', 'error_description': 'bad code'})
    state = _login_state(app_client)
    r = app_client.get(f'/linkedin/callback?code=abc&state={state}')
    assert r.status_code == 401
    assert r.get_json() == {'error': 'bad code'}


@patch('linkedin.requests.post')
def test_callback_network_error_is_500(mock_post, app_client):
    mock_post.side_effect = requests.ConnectionError('connection refused')
    state = _login_state(app_client)
    r = app_client.get(f'/linkedin/callback?code=abc&state={state}')
    assert r.status_code == 500
    assert 'connection refused' in r.get_json()['error']


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_requires_fields(mock_post, mock_get, app_client):
    for body in ({}, {'accessToken': 't'}, {'message': 'hi'}, {'accessToken': '', 'message': 'hi'}):
        r = app_client.post('/api/linkedin/share', json=body)
        assert r.status_code == 400
        assert r.get_json() == {'error': 'Access token and message are required.'}
    mock_get.assert_not_called()
    mock_post.assert_not_called()


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_publishes_as_live_member(mock_post, mock_get, app_client, fake_response):
    mock_get.return_value = fake_response(200, {'sub': 'abc123', 'name': 'Alice'})
    mock_post.return_value = fake_response(201, {}, headers={'x-restli-id': 'urn:li:share:1'})

    r = app_client.post('/api/linkedin/share', json={'accessToken': 'user-token', 'message': 'I passed!'})
    assert r.status_code == 200
    assert r.get_json() == {'message': 'Successfully shared on LinkedIn!'}

    get_args, get_kwargs = mock_get.call_args
    assert get_args[0] == USERINFO_URL
    assert get_kwargs['headers']['Authorization'] == 'Bearer user-token'

    post_args, post_kwargs = mock_post.call_args
    assert post_args[0] == UGC_POSTS_URL
    assert post_kwargs['headers']['Authorization'] == 'Bearer user-token'
    body = post_kwargs['json']
    assert body['author'] == 'urn:li:person:abc123'
    assert body['lifecycleState'] == 'PUBLISHED'
    content = body['specificContent']['com.linkedin.ugc.ShareContent']
    assert content['shareCommentary'] == {'text': 'I passed!'}
    assert content['shareMediaCategory'] == 'NONE'
    assert body['visibility'] == {'com.linkedin.ugc.MemberNetworkVisibility': 'PUBLIC'}


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_accepts_form_body(mock_post, mock_get, app_client, fake_response):
    mock_get.return_value = fake_response(200, {'id': 'legacy-id'})
    mock_post.return_value = fake_response(201, {})
    r = app_client.post('/api/linkedin/share', data={'accessToken': 't', 'message': 'hi'})
    assert r.status_code == 200
    assert mock_post.call_args[1]['json']['author'] == 'urn:li:person:legacy-id'


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_without_member_id_is_500(mock_post, mock_get, app_client, fake_response):
    mock_get.return_value = fake_response(200, {'name': 'No Id'})
    r = app_client.post('/api/linkedin/share', json={'accessToken': 't', 'message': 'hi'})
    assert r.status_code == 500
    assert r.get_json() == {'error': 'Invalid LinkedIn user information.'}
    mock_post.assert_not_called()


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_relays_publish_error(mock_post, mock_get, app_client, fake_response):
    mock_get.return_value = fake_response(200, {'sub': 'abc123'})
    mock_post.return_value = fake_response(403, {'message': 'Not enough permissions', 'status': 403})
    r = app_client.post('/api/linkedin/share', json={'accessToken': 't', 'message': 'hi'})
    assert r.status_code == 403
    assert r.get_json() == {'error': 'Not enough permissions'}


@patch('linkedin.requests.get')
def test_share_identity_network_error_is_500(mock_get, app_client):
    mock_get.side_effect = requests.Timeout('timed out')
    r = app_client.post('/api/linkedin/share', json={'accessToken': 't', 'message': 'hi'})
    assert r.status_code == 500
    assert 'timed out' in r.get_json()['error']


@patch('linkedin.requests.post')
def test_client_rejects_token_response_without_token(mock_post, fake_response):
    mock_post.return_value = fake_response(200, {'expires_in': 10})
    client = LinkedInClient('id', 'secret', 'http://localhost/cb', timeout=3)
    with pytest.raises(LinkedInError) as exc:
        client.exchange_code('abc')
    assert exc.value.status_code == 500
    assert mock_post.call_args[1]['timeout'] == 3


@patch('linkedin.requests.get')
@patch('linkedin.requests.post')
def test_share_relays_identity_lookup_error(mock_post, mock_get, app_client, fake_response):
    mock_get.return_value = fake_response(401, {'message': 'Invalid access token', 'status': 401})
    r = app_client.post('/api/linkedin/share', json={'accessToken': 'expired', 'message': 'hi'})
    assert r.status_code == 401
    assert r.get_json() == {'error': 'Invalid access token'}
    mock_post.assert_not_called()


@patch('linkedin.requests.post')
def test_callback_rejects_expired_state(mock_post, app_client, monkeypatch):
    state = _login_state(app_client)
    # Even a zero-second age exceeds a negative max age
    monkeypatch.setattr('linkedin_routes.STATE_MAX_AGE', -1)
    r = app_client.get(f'/linkedin/callback?code=abc&state={state}')
    assert r.status_code == 400
    assert r.get_json() == {'error': 'Invalid OAuth state.'}
    mock_post.assert_not_called()
