from flask import Blueprint, request

from app.gateway import get_gateway, GatewayError
from app.schemas.profile import ProfileUpdateRequest
from app.services.catalog import SavedDestinations
from app.services.notifications import RequestNotifier
from app.utils import auth_required, current_user, ok, error, validate_schema
from app.version import API_PREFIX

profile_bp = Blueprint("profile", __name__, url_prefix=API_PREFIX)

PROFILE_FIELDS = ("full_name", "phone", "avatar_url")


def _serialize_profile(user_id, row):
    row = row or {}
    data = {"id": user_id}
    for key in PROFILE_FIELDS:
        data[key] = row.get(key)
    return data


def _saved():
    return SavedDestinations(get_gateway(), RequestNotifier(), current_user())


@profile_bp.route("/profile", methods=["GET"])
@auth_required
def get_profile():
    user = current_user()
    try:
        row = get_gateway().select_one("profiles", filters={"id": user.user_id})
    except GatewayError:
        RequestNotifier().error("Failed to load profile data")
        return error("Failed to load profile data", status=503)
    # The identity provider owns the account; a missing row is an empty profile
    return ok(_serialize_profile(user.user_id, row))


@profile_bp.route("/profile", methods=["POST"])
@auth_required
@validate_schema(ProfileUpdateRequest)
def update_profile():
    data: ProfileUpdateRequest = request.validated_data
    user = current_user()
    notifier = RequestNotifier()
    patch = data.model_dump(exclude_unset=True)
    gateway = get_gateway()
    try:
        updated = gateway.update("profiles", patch, {"id": user.user_id}) if patch else None
        if not updated:
            existing = gateway.select_one("profiles", filters={"id": user.user_id})
            row = existing or gateway.insert("profiles", {"id": user.user_id, **patch})
        else:
            row = updated[0]
    except GatewayError:
        notifier.error("Failed to update profile")
        return error("Failed to update profile", status=503)
    notifier.success("Profile updated successfully")
    return ok(_serialize_profile(user.user_id, row), message="Profile updated successfully")


@profile_bp.route("/saved-destinations", methods=["GET"])
@auth_required
def saved_destinations():
    return ok(_saved().list())


@profile_bp.route("/destinations/<destination_id>/saved", methods=["GET"])
@auth_required
def is_destination_saved(destination_id):
    return ok({"destination_id": destination_id, "saved": _saved().is_saved(destination_id)})


@profile_bp.route("/destinations/<destination_id>/save", methods=["POST"])
@auth_required
def toggle_saved_destination(destination_id):
    try:
        destination = get_gateway().select_one("destinations", filters={"id": destination_id})
    except GatewayError:
        destination = None
    if destination is None:
        return error("Destination not found", status=404)
    saved = _saved().toggle(destination_id)
    if saved is None:
        return error("Failed to update saved destinations", status=503)
    return ok({"destination_id": destination_id, "saved": saved})


@profile_bp.route("/saved-destinations/<saved_id>", methods=["DELETE"])
@auth_required
def remove_saved_destination(saved_id):
    if not _saved().remove(saved_id):
        return error("Failed to remove destination", status=404)
    return ok({"id": saved_id}, message="Destination removed")
