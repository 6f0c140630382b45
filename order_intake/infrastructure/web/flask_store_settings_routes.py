import logging

from flask import Blueprint, jsonify, request
from order_intake.application.use_cases import UpdateStoreSettingsUseCase
from order_intake.domain.exceptions import MalformedRequestError, PersistenceError
from .auth import require_admin_role

logger = logging.getLogger(__name__)


def create_store_settings_blueprint(update_case: UpdateStoreSettingsUseCase, secret_provider):
    """Blueprint de configuración de la tienda, solo para administradores."""
    settings_bp = Blueprint('store_settings', __name__)

    @settings_bp.route('/', methods=['POST', 'PUT'], strict_slashes=False)
    @require_admin_role(secret_provider)
    def update_store_settings():
        payload = request.get_json(force=True, silent=True)
        try:
            saved = update_case.execute(payload)
        except MalformedRequestError:
            return jsonify({"error": "Invalid JSON body"}), 400
        except PersistenceError:
            return jsonify({"error": "Failed to save settings"}), 500
        except Exception:
            logger.exception("Error saving store settings")
            return jsonify({"error": "Internal server error"}), 500

        return jsonify({"success": True, "data": saved}), 200

    return settings_bp
