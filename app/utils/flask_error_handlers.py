"""Flask application error handlers.

These catch what escapes ``handle_api_errors``: routing errors, SpecTree
validation and anything raised outside a decorated view.
"""

from flask import Flask, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from app.exceptions import (
    BusinessLogicException,
    InvalidOperationException,
    RecordNotFoundException,
)
from app.utils.error_handling import integrity_error_response


def register_error_handlers(app: Flask) -> None:
    """Register Flask error handlers for common exceptions."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """Handle Pydantic validation errors."""
        error_details = []
        for err in error.errors():
            field = ".".join(str(x) for x in err["loc"])
            error_details.append(f"{field}: {err['msg']}")

        return jsonify({
            "error": "Validation failed",
            "details": error_details
        }), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        """Handle database integrity constraint violations."""
        return integrity_error_response(error)

    @app.errorhandler(BusinessLogicException)
    def handle_business_logic_error(error: BusinessLogicException):
        """Handle domain exceptions raised outside decorated views."""
        status = 400
        if isinstance(error, RecordNotFoundException):
            status = 404
        elif isinstance(error, InvalidOperationException):
            status = 409

        return jsonify({
            "error": error.message,
            "details": {"code": error.error_code}
        }), status

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle 404 Not Found errors."""
        return jsonify({
            "error": "Resource not found",
            "details": "The requested resource could not be found"
        }), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return jsonify({
            "error": "Method not allowed",
            "details": "The HTTP method is not allowed for this endpoint"
        }), 405

    @app.errorhandler(500)
    def handle_internal_server_error(error):
        """Handle 500 Internal Server Error."""
        return jsonify({
            "error": "Internal server error",
            "details": "An unexpected error occurred"
        }), 500
