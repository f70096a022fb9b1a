"""Centralized error handling utilities."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from flask import current_app, jsonify
from flask.wrappers import Response
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest

from app.exceptions import (
    BusinessLogicException,
    InvalidInputException,
    InvalidOperationException,
    RecordNotFoundException,
    TransactionFailedException,
)
from app.utils import get_current_correlation_id

logger = logging.getLogger(__name__)


def _mark_request_for_rollback() -> None:
    """Flag the request session so teardown rolls back instead of committing."""
    container = getattr(current_app, "container", None)
    if container is not None:
        container.db_session().info["needs_rollback"] = True


def integrity_error_response(e: IntegrityError) -> tuple[Response, int]:
    error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)

    # Map common constraint violations to user-friendly messages
    if "UNIQUE constraint failed" in error_msg or "duplicate key" in error_msg.lower():
        return jsonify({
            "error": "Resource already exists",
            "details": {"message": "A record with these values already exists"}
        }), 409
    elif "FOREIGN KEY constraint failed" in error_msg or "foreign key" in error_msg.lower():
        return jsonify({
            "error": "Invalid reference",
            "details": {"message": "Referenced resource does not exist"}
        }), 400
    elif "NOT NULL constraint failed" in error_msg or "null value" in error_msg.lower():
        return jsonify({
            "error": "Missing required field",
            "details": {"message": "Required field cannot be empty"}
        }), 400
    else:
        return jsonify({
            "error": "Database constraint violation",
            "details": {"message": "The operation violates a database constraint"}
        }), 400


def handle_api_errors(func: Callable[..., Any]) -> Callable[..., Response | tuple[Response | str, int]]:
    """Decorator to handle common API errors consistently.

    Domain exceptions become JSON error bodies with a matching status code and
    the request session is flagged for rollback.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except BadRequest:
            _mark_request_for_rollback()
            # JSON parsing errors from request.get_json()
            return jsonify({
                "error": "Invalid JSON",
                "details": {"message": "Request body must be valid JSON"}
            }), 400
        except ValidationError as e:
            _mark_request_for_rollback()
            # Pydantic validation errors
            error_details = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                error_details.append({
                    "message": error["msg"],
                    "field": field
                })

            return jsonify({
                "error": "Validation failed",
                "details": error_details
            }), 400

        except RecordNotFoundException as e:
            _mark_request_for_rollback()
            return jsonify({
                "error": e.message,
                "details": {"message": "The requested resource could not be found"}
            }), 404

        except InvalidInputException as e:
            _mark_request_for_rollback()
            return jsonify({
                "error": e.message,
                "details": {"message": "The request contains an invalid value"}
            }), 400

        except InvalidOperationException as e:
            _mark_request_for_rollback()
            return jsonify({
                "error": e.message,
                "details": {"message": "The requested operation cannot be performed"}
            }), 409

        except TransactionFailedException as e:
            _mark_request_for_rollback()
            logger.error("Transaction failed [%s]: %s", get_current_correlation_id(), e.message)
            return jsonify({
                "error": e.message,
                "details": {"message": "The change was not saved"}
            }), 500

        except BusinessLogicException as e:
            _mark_request_for_rollback()
            # Fallback for domain exceptions without a dedicated mapping
            return jsonify({
                "error": e.message,
                "details": {"message": "A rig history operation failed"}
            }), 400

        except IntegrityError as e:
            _mark_request_for_rollback()
            return integrity_error_response(e)

        except Exception as e:
            _mark_request_for_rollback()
            logger.exception("Unhandled error in %s [%s]", func.__name__, get_current_correlation_id())
            return jsonify({
                "error": "Internal server error",
                "details": {"message": str(e)}
            }), 500

    return wrapper
