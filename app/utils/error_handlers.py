from flask import jsonify


def first_error_message(messages):
    """First human-readable string in a (possibly nested) marshmallow error dict."""
    if isinstance(messages, str):
        return messages
    if isinstance(messages, dict):
        for value in messages.values():
            found = first_error_message(value)
            if found:
                return found
    if isinstance(messages, (list, tuple)):
        for value in messages:
            found = first_error_message(value)
            if found:
                return found
    return None


# Handle PermissionError
def handle_permission_error(error):
    response = {
        "success": False,
        "error": "PermissionError",
        "message": str(error),
        "status_code": 403  # Forbidden
    }
    return jsonify(response), 403

# Handle ValidationError
def handle_validation_error(error):
    response = {
        "success": False,
        "error": "Validation Error",
        "message": first_error_message(error.messages) or "Validation failed",
        "errors": error.messages,
        "status_code": 400  # Bad Request
    }
    return jsonify(response), 400

# Handle bson InvalidId (malformed ObjectId in a path or body)
def handle_invalid_id(error):
    response = {
        "success": False,
        "error": "Invalid ID",
        "message": "Invalid ID format",
        "status_code": 400
    }
    return jsonify(response), 400

def handle_http_error(error):
    """
    flask-smorest reports argument failures and auth aborts through abort();
    the payload lives on error.data. Reshape it into the standard envelope.
    """
    data = getattr(error, "data", None) or {}
    messages = data.get("messages")
    code = getattr(error, "code", 500) or 500
    message = (
        data.get("message")
        or first_error_message(messages)
        or getattr(error, "description", None)
        or "Request failed"
    )
    response = {
        "success": False,
        "message": message,
        "status_code": code,
    }
    if messages:
        response["errors"] = messages
    return jsonify(response), code

def handle_rate_limit(e):
    # e.description contains whatever you passed as error_message=
    return jsonify({
        "success": False,
        "status_code": 429,
        "error": "Too Many Requests",
        "message": e.description or "Too many requests, please try again later."
    }), 429
