"""
Google OAuth2 web flow and spreadsheet creation.

The consent redirect and the callback are two separate requests, so the
OAuth ``state`` and PKCE code verifier are handed back in by the caller.
Credentials are written to a plain JSON token file.
"""

import json
import logging
import os

import google.oauth2.credentials
import google_auth_oauthlib.flow
from googleapiclient.discovery import build

SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/drive.file',
]

AUTH_URI = 'https://accounts.google.com/o/oauth2/auth'
TOKEN_URI = 'https://oauth2.googleapis.com/token'
SPREADSHEET_URL = 'https://docs.google.com/spreadsheets/d/{}'

log = logging.getLogger(__name__)


class GoogleConfigError(RuntimeError):
    """Raised when the OAuth client settings are missing."""


class StoredTokensNotFound(FileNotFoundError):
    pass


def client_config(config):
    client_id = config.get('GOOGLE_CLIENT_ID')
    client_secret = config.get('GOOGLE_CLIENT_SECRET')
    redirect_uri = config.get('GOOGLE_REDIRECT_URI')
    if not client_id or not client_secret or not redirect_uri:
        raise GoogleConfigError('Missing Google OAuth environment variables. See .env.example')

    return {
        'web': {
            'client_id': client_id,
            'client_secret': client_secret,
            'auth_uri': AUTH_URI,
            'token_uri': TOKEN_URI,
            'redirect_uris': [redirect_uri],
        }
    }


def make_flow(config, state=None, code_verifier=None):
    return google_auth_oauthlib.flow.Flow.from_client_config(
        client_config(config),
        scopes=SCOPES,
        state=state,
        redirect_uri=config['GOOGLE_REDIRECT_URI'],
        code_verifier=code_verifier,
    )


def authorization_url(config):
    """Return ``(url, state, code_verifier)`` for the consent redirect."""
    flow = make_flow(config)
    url, state = flow.authorization_url(access_type='offline', prompt='consent')
    return url, state, flow.code_verifier


def exchange_code(config, code, state=None, code_verifier=None):
    flow = make_flow(config, state=state, code_verifier=code_verifier)
    flow.fetch_token(code=code)
    return flow.credentials


def save_tokens(creds, path):
    with open(path, 'w', encoding='utf-8') as token_file:
        token_file.write(creds.to_json())
    log.info('Credentials saved to %s.', path)


def load_tokens(path):
    """Load stored credentials.

    Raises:
        StoredTokensNotFound: no token file has been written yet.
        ValueError: the file is not valid authorized-user JSON.
    """
    if not os.path.exists(path):
        raise StoredTokensNotFound(path)
    try:
        return google.oauth2.credentials.Credentials.from_authorized_user_file(path, SCOPES)
    except json.JSONDecodeError as ex:
        raise ValueError(f'Token file {path} is not valid JSON') from ex


def create_spreadsheet(creds, title):
    """Create a spreadsheet with a single ``Sheet1`` tab.

    Returns a ``(spreadsheet_id, spreadsheet_url)`` tuple.
    """
    service = build('sheets', 'v4', credentials=creds, cache_discovery=False)
    body = {
        'properties': {'title': title},
        'sheets': [{'properties': {'title': 'Sheet1'}}],
    }
    response = service.spreadsheets().create(body=body, fields='spreadsheetId').execute()

    spreadsheet_id = response['spreadsheetId']
    log.info('Spreadsheet "%s" created: %s', title, spreadsheet_id)
    return spreadsheet_id, SPREADSHEET_URL.format(spreadsheet_id)
