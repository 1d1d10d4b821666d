from flask import jsonify, request

from ladder.errors import InvalidArgument


def envelope(result=None, message='', status=True, code=200):
    """Every response body has the same shape: status, result and message."""
    return jsonify({'status': status, 'result': result, 'message': message}), code


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgument('Invalid request body')
    return data
