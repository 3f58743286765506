from flask import current_app, request


def services():
    return current_app.extensions["venue_booking"]


def payload() -> dict:
    """The JSON body as a dict; anything else counts as an empty body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
