# apps/core/exceptions.py

"""
Typed errors raised by the service layer

The JSON API decorator maps each one to its status code. Board reads
collapse "not a member" into NotFound so board existence never leaks.
"""


class KanbanError(Exception):
    """Base class for every error the API turns into a response"""

    status_code = 400
    code = 'ERROR'
    default_message = 'Request failed'

    def __init__(self, message=None, code=None, errors=None):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.errors = errors
        super().__init__(self.message)

    def as_dict(self):
        data = {'error': self.message, 'code': self.code}
        if self.errors:
            data['errors'] = self.errors
        return data


class NotFound(KanbanError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Not found'


class Forbidden(KanbanError):
    status_code = 403
    code = 'FORBIDDEN'
    default_message = 'Access denied'


class ValidationFailed(KanbanError):
    status_code = 400
    code = 'VALIDATION_FAILED'
    default_message = 'Invalid input'


class Conflict(KanbanError):
    status_code = 409
    code = 'CONFLICT'
    default_message = 'Already exists'


class Unauthorized(KanbanError):
    status_code = 401
    code = 'UNAUTHORIZED'
    default_message = 'Unauthorized'
