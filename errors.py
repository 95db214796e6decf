"""Error taxonomy shared by the accounting and gamification modules.

Routes translate these into JSON responses (see register_error_handlers).
"""

from flask import jsonify


class CarbonTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CarbonTrackerError):
    """Unknown user, goal or challenge id."""

    status_code = 404


class ValidationFailure(CarbonTrackerError):
    """Input rejected before any calculation or write happens."""

    status_code = 400


class MissingFactor(CarbonTrackerError):
    # Raised by factor lookups and recovered by the calculator's fallback chain.
    status_code = 500


def _error_response(err: CarbonTrackerError):
    return jsonify({"success": False, "error": err.message}), err.status_code


def register_error_handlers(bp):
    bp.register_error_handler(NotFound, _error_response)
    bp.register_error_handler(ValidationFailure, _error_response)
