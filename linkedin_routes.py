from flask import Blueprint, request, jsonify, redirect, session, current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
import logging
import secrets

from linkedin import LinkedInClient, LinkedInError
from utils import json_error

linkedin_bp = Blueprint('linkedin', __name__)

STATE_SESSION_KEY = 'linkedin_oauth_state'
STATE_SALT = 'linkedin-oauth-state'
STATE_MAX_AGE = 600  # 10 minutes


def get_client() -> LinkedInClient:
    return current_app.extensions['linkedin']


def _state_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=STATE_SALT)


def _issue_state() -> str:
    nonce = secrets.token_urlsafe(32)
    session[STATE_SESSION_KEY] = nonce
    return _state_serializer().dumps(nonce)


def _state_matches(state) -> bool:
    # Single use: the nonce is consumed whether or not it matches
    expected = session.pop(STATE_SESSION_KEY, None)
    if not state or not expected:
        return False
    try:
        nonce = _state_serializer().loads(state, max_age=STATE_MAX_AGE)
    except (SignatureExpired, BadSignature):
        return False
    return secrets.compare_digest(str(nonce), expected)


@linkedin_bp.route('/linkedin/login', methods=['GET'])
def linkedin_login():
    auth_url = get_client().authorization_url(_issue_state())
    logging.info('[LINKEDIN LOGIN] Redirecting to LinkedIn authorization')
    return redirect(auth_url, code=302)


@linkedin_bp.route('/linkedin/callback', methods=['GET'])
def linkedin_callback():
    if request.args.get('error'):
        description = request.args.get('error_description') or request.args.get('error')
        logging.warning('[LINKEDIN CALLBACK] Authorization denied: %s', description)
        return json_error(description, 400)

    code = request.args.get('code')
    if not code:
        return json_error('Authorization code is missing.', 400)
    if not _state_matches(request.args.get('state')):
        logging.warning('[LINKEDIN CALLBACK] Rejected callback with invalid state')
        return json_error('Invalid OAuth state.', 400)

    try:
        token = get_client().exchange_code(code)
    except LinkedInError as e:
        logging.exception('[LINKEDIN CALLBACK] Token exchange failed')
        return json_error(e.message, e.status_code)
    return jsonify({'access_token': token['access_token'], 'expires_in': token['expires_in']})


@linkedin_bp.route('/api/linkedin/share', methods=['POST'])
def linkedin_share():
    payload = request.get_json(silent=True) or request.form.to_dict()
    if not isinstance(payload, dict):
        payload = {}
    access_token = payload.get('accessToken')
    message = payload.get('message')
    if not access_token or not message:
        return json_error('Access token and message are required.', 400)
    if not isinstance(access_token, str) or not isinstance(message, str):
        return json_error('Access token and message must be strings.', 400)

    try:
        post_id = get_client().share(access_token, message)
    except LinkedInError as e:
        logging.exception('[LINKEDIN SHARE] Share failed')
        return json_error(e.message, e.status_code)
    logging.info('[LINKEDIN SHARE] Published post %s', post_id or '(no id returned)')
    return jsonify({'message': 'Successfully shared on LinkedIn!'}), 200
