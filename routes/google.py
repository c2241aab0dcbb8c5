from flask import Blueprint, current_app, jsonify, redirect, request, session
import httplib2
import requests
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

import google_sheets
from google_sheets import GoogleConfigError, StoredTokensNotFound

google_bp = Blueprint('google', __name__, url_prefix='/auth')

GOOGLE_ERRORS = (
    GoogleConfigError, GoogleAuthError, OAuth2Error, HttpError,
    requests.RequestException, httplib2.HttpLib2Error, OSError,
)


@google_bp.route('/google')
def redirect_to_google():
    try:
        url, state, code_verifier = google_sheets.authorization_url(current_app.config)
    except GoogleConfigError:
        current_app.logger.exception('Failed to generate Google auth URL')
        return jsonify(error='Failed to generate auth URL'), 500

    session['google_oauth_state'] = state
    session['google_code_verifier'] = code_verifier
    return redirect(url)


@google_bp.route('/google/callback')
def google_callback():
    code = request.args.get('code')
    if not code:
        return 'Missing code', 400

    title = request.args.get('title') or 'New Spreadsheet from App'
    try:
        creds = google_sheets.exchange_code(
            current_app.config,
            code,
            state=session.pop('google_oauth_state', None),
            code_verifier=session.pop('google_code_verifier', None),
        )
        google_sheets.save_tokens(creds, current_app.config['GOOGLE_TOKENS_PATH'])
        spreadsheet_id, spreadsheet_url = google_sheets.create_spreadsheet(creds, title)
    except GOOGLE_ERRORS:
        current_app.logger.exception('Google callback error')
        return jsonify(error='Failed to exchange code or create spreadsheet'), 500

    return jsonify(message='Spreadsheet created', spreadsheetId=spreadsheet_id, spreadsheetUrl=spreadsheet_url)


@google_bp.route('/google/create', methods=['POST'])
def create_from_stored_tokens():
    data = request.get_json(silent=True) or {}
    title = data.get('title') or 'New Spreadsheet from Stored Tokens'

    try:
        creds = google_sheets.load_tokens(current_app.config['GOOGLE_TOKENS_PATH'])
    except StoredTokensNotFound:
        return jsonify(error='No stored tokens. Authorize first via /auth/google'), 400
    except ValueError:
        current_app.logger.exception('Stored Google tokens could not be read')
        return jsonify(error='Stored tokens are invalid. Authorize again via /auth/google'), 400

    try:
        spreadsheet_id, spreadsheet_url = google_sheets.create_spreadsheet(creds, title)
    except GOOGLE_ERRORS:
        current_app.logger.exception('Create spreadsheet error')
        return jsonify(error='Failed to create spreadsheet'), 500

    return jsonify(message='Spreadsheet created', spreadsheetId=spreadsheet_id, spreadsheetUrl=spreadsheet_url)
