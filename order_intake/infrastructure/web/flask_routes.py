import logging
import math

from flask import Blueprint, jsonify, request
from order_intake.application.use_cases import SubmitOrderUseCase
from order_intake.domain.exceptions import (
    MalformedRequestError,
    OrderValidationError,
    PersistenceError,
    RateLimitExceededError,
)
from order_intake.infrastructure.rate_limiting.in_memory_rate_limiter import UNKNOWN_CLIENT

logger = logging.getLogger(__name__)


def extract_client_ip(headers, remote_addr=None, trust_proxy_headers=True) -> str:
    """
    Obtiene la IP del cliente.

    Con `trust_proxy_headers` se usa el primer valor de X-Forwarded-For, luego
    X-Real-IP. Esto solo es fiable detrás de un proxy inverso de confianza.
    Sin IP conocida se devuelve "unknown", un cubo compartido por todos esos clientes.
    """
    if trust_proxy_headers:
        forwarded_for = headers.get('X-Forwarded-For', '')
        first_hop = forwarded_for.split(',')[0].strip()
        if first_hop:
            return first_hop
        real_ip = (headers.get('X-Real-IP') or '').strip()
        if real_ip:
            return real_ip
        return UNKNOWN_CLIENT
    return remote_addr or UNKNOWN_CLIENT


def create_api_blueprint(submit_case: SubmitOrderUseCase, trust_proxy_headers: bool = True):
    """
    Función de fábrica para inyectar el Caso de Uso en el Blueprint.
    Crea un nuevo Blueprint en cada llamada para evitar conflictos en tests.
    """
    api_bp = Blueprint('orders', __name__)

    @api_bp.route('/', methods=['POST'], strict_slashes=False)
    def submit_order():
        client_ip = extract_client_ip(request.headers, request.remote_addr, trust_proxy_headers)
        payload = request.get_json(force=True, silent=True)

        try:
            result = submit_case.execute(client_ip, payload)

        except RateLimitExceededError as e:
            reset_in = math.ceil(e.reset_in)
            response = jsonify({
                "error": "Too many orders. Please try again later.",
                "resetIn": reset_in
            })
            response.headers['Retry-After'] = str(reset_in)
            return response, 429

        except MalformedRequestError:
            return jsonify({"error": "Invalid JSON body"}), 400

        except OrderValidationError as e:
            return jsonify({"error": "Validation failed", "details": e.errors}), 400

        except PersistenceError:
            # El detalle ya quedó en el log del repositorio
            return jsonify({"error": "Failed to create order"}), 500

        except Exception:
            logger.exception("Error processing order")
            return jsonify({"error": "Internal server error"}), 500

        response = jsonify({"success": True, "orderId": result["order_id"]})
        response.headers['X-RateLimit-Remaining'] = str(result["remaining"])
        return response, 201

    return api_bp
