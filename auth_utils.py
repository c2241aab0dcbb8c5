import hmac
from functools import wraps
from flask import current_app, g, jsonify, request

BEARER_PREFIX = 'Bearer '


def token_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        token = header[len(BEARER_PREFIX):] if header.startswith(BEARER_PREFIX) else None

        if not token:
            return jsonify(error='Missing token'), 401

        if not hmac.compare_digest(token.encode(), current_app.config['API_TOKEN'].encode()):
            current_app.logger.warning('Rejected bearer token for %s', request.path)
            return jsonify(error='Invalid token'), 403

        g.user = {'id': 1, 'role': 'admin'}
        return fn(*args, **kwargs)
    return wrapper
