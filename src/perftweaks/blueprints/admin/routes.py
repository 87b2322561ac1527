"""Admin routes for reading and saving plugin settings."""

from __future__ import annotations

from flask import current_app, jsonify, redirect, request, url_for

from perftweaks.services.admin_settings import current_settings, save_settings
from perftweaks.services.settings_store import SettingsStore

from . import bp


def _store() -> SettingsStore:
    return current_app.extensions["perftweaks"].store


def _prefers_json_response() -> bool:
    accepts = request.accept_mimetypes
    return request.is_json or accepts["application/json"] >= accepts["text/html"]


@bp.get("/settings")
def settings_index():
    """Current value of every setting."""
    store = _store()
    return jsonify(
        {
            "settings": current_settings(store),
            "degraded": store.is_degraded,
            "updated": request.args.get("npt_updated"),
        }
    )


@bp.post("/settings")
def settings_save():
    """Validate and persist a settings submission."""
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"updated": False, "errors": ["invalid_payload"]}), 400
        form = payload
    else:
        form = request.form.to_dict()

    result = save_settings(_store(), form)

    if _prefers_json_response():
        return jsonify(result.to_dict()), 200 if result.ok else 400

    return redirect(url_for("admin.settings_index", npt_updated="1" if result.ok else "0"))
