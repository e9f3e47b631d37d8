from .responses import ok, error, validation_error_response
from .auth import auth_required, role_required
from .validation import schema_errors, validate_schema
from .db import lock_row, transactional
from .jwt import create_access_token, decode_token, TokenError

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'auth_required',
    'role_required',
    'create_access_token',
    'decode_token',
    'TokenError',
    'schema_errors',
    'validate_schema',
    'transactional',
    'lock_row',
]
