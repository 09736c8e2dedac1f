from flask import Blueprint, current_app, jsonify, request

from taskvault.models.account_model import Credentials
from taskvault.utils.auth import get_accounts


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    creds = Credentials.from_payload(request.get_json(silent=True))
    account_id = get_accounts().register(creds.email, creds.password)
    return jsonify(message="Account created", id=account_id), 201


@auth_bp.post("/login")
def login():
    creds = Credentials.from_payload(request.get_json(silent=True))
    result = get_accounts().authenticate(creds.email, creds.password)
    current_app.logger.info("Login for account %s", result.user["id"])
    return jsonify(token=result.token, user=result.user), 200
