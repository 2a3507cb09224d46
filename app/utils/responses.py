from flask import g, jsonify


def _envelope(payload, redirect=None):
    notes = getattr(g, "notifications", None)
    if notes:
        payload["notifications"] = list(notes)
    if redirect:
        payload["redirect"] = redirect
    return payload


def ok(data=None, message="success", status=200, redirect=None):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(_envelope(payload, redirect)), status


def error(message, status=400, code=None, redirect=None):
    return jsonify(_envelope({
        "status": "error",
        "message": message,
        "code": code or status
    }, redirect)), status


def validation_error_response(errors):
    return jsonify(_envelope({
        "status": "error",
        "message": "Invalid request",
        "code": 400,
        "errors": errors,
    })), 400


def internal_error_response():
    return error("An unexpected error occurred, please try again later", status=500)
