# utils/errors.py
import logging

from flask import jsonify
from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code

    def payload(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        return {"error": self.message, **self.payload()}


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class ValidationError(AppError):
    status_code = 400
    message = "Validation error"

    def __init__(self, message=None, details=None):
        super().__init__(message)
        self.details = details or []

    def payload(self):
        return {"details": self.details} if self.details else {}


class InsufficientStock(AppError):
    status_code = 400

    def __init__(self, feed_name: str, available):
        self.feed_name = feed_name
        self.available = available
        super().__init__(
            f"Insufficient stock for {feed_name}. Available: {float(available):.0f}"
        )

    def payload(self):
        return {"feedName": self.feed_name, "available": float(self.available)}


class DuplicateBill(AppError):
    status_code = 409

    def __init__(self, bill_id: int, bill_number: str):
        self.bill_id = bill_id
        self.bill_number = bill_number
        super().__init__(
            "Duplicate bill detected. A similar bill was created recently. "
            "Please check the bills list."
        )

    def payload(self):
        return {
            "duplicateBillId": self.bill_id,
            "duplicateBillNumber": self.bill_number,
        }


class BillNumberConflict(AppError):
    status_code = 409
    message = "Bill number conflict detected. Please try again."


class AmountExceedsPending(AppError):
    status_code = 400

    def __init__(self, amount, pending):
        self.amount = amount
        self.pending = pending
        super().__init__("Payment amount exceeds pending amount")

    def payload(self):
        return {"pendingAmount": float(self.pending)}


class PersistenceFailure(AppError):
    status_code = 500
    message = "Internal server error"


def schema_details(ex: SchemaError) -> list:
    """Field-level details of a pydantic error, without the echoed input."""
    return [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())),
            "message": err.get("msg"),
        }
        for err in ex.errors()
    ]


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def _app_error(ex: AppError):
        if ex.status_code >= 500:
            logger.error("request failed: %s", ex.message)
        return jsonify(ex.to_dict()), ex.status_code

    @app.errorhandler(SchemaError)
    def _schema_error(ex: SchemaError):
        return (
            jsonify({"error": "Validation error", "details": schema_details(ex)}),
            400,
        )

    @app.errorhandler(HTTPException)
    def _http_error(ex: HTTPException):
        return jsonify({"error": ex.description or ex.name}), ex.code

    @app.errorhandler(SQLAlchemyError)
    def _db_error(ex: SQLAlchemyError):
        logger.exception("database error")
        return jsonify({"error": PersistenceFailure.message}), 500

    @app.errorhandler(Exception)
    def _unhandled(ex: Exception):
        logger.exception("unhandled error")
        return jsonify({"error": "Internal server error"}), 500
