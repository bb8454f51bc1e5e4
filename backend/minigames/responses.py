"""Uniform response envelope shared by every JSON endpoint.

Success bodies look like::

    {"success": true, "status_code": 201, "message": "...", "data": {...}}

Failures are raised as :class:`ErrorResponse` and rendered by the app's
error handlers into the same shape with ``success`` false.
"""
from http import HTTPStatus
from typing import Any, Optional

from flask import jsonify


class ErrorResponse(Exception):
    """A failure that has already been classified and is safe to show the caller."""

    def __init__(self, status_code: int, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.status_code = int(status_code)
        self.message = message
        self.errors = errors

    def json(self) -> dict:
        body = {
            'success': False,
            'status_code': self.status_code,
            'message': self.message,
        }
        if self.errors is not None:
            body['errors'] = self.errors
        return body

    def to_response(self):
        return jsonify(self.json()), self.status_code


class SuccessResponse:
    def __init__(self, status_code: int, message: str, data: Any = None):
        self.status_code = int(status_code)
        self.message = message
        self.data = data

    def json(self) -> dict:
        return {
            'success': True,
            'status_code': self.status_code,
            'message': self.message,
            'data': self.data,
        }

    def to_response(self):
        return jsonify(self.json()), self.status_code


def internal_error(message: str = 'Internal server error') -> ErrorResponse:
    return ErrorResponse(HTTPStatus.INTERNAL_SERVER_ERROR, message)
