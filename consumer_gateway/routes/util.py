"""Helpers shared by the blueprints."""

from http import HTTPStatus

from flask import Response, jsonify, make_response, request
from werkzeug.datastructures import MultiDict


def request_params() -> MultiDict:
    """Get submitted parameters from a JSON body or from form data."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return MultiDict(payload)
    return request.form


def respond(data: dict, code: int, headers: dict) -> Response:
    """Render controller data as a JSON response."""
    if code == HTTPStatus.NO_CONTENT:
        return make_response('', code, headers)
    response: Response = jsonify(data)
    response.status_code = code
    response.headers.extend(headers)
    return response
