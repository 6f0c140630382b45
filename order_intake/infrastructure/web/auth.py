"""
Autorización de las rutas de administración.

Se espera un JWT HS256 firmado con ADMIN_JWT_SECRET cuyo claim `role` sea "admin".
"""
import logging
from functools import wraps

import jwt
from flask import jsonify, request

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def log_audit_event(action, reason, user_id, endpoint, ip_address):
    """Registra un evento de auditoría de acceso."""
    logger.warning(
        f"AUDIT action={action} user_id={user_id} endpoint={endpoint} "
        f"ip={ip_address} reason={reason}"
    )


def require_admin_role(secret_provider):
    """
    Decorador que exige un token de administrador.

    :param secret_provider: función sin argumentos que devuelve el secreto de firma.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # 1. Obtener token del header Authorization
            auth_header = request.headers.get('Authorization', '')
            if not auth_header.startswith('Bearer '):
                log_audit_event('ACCESS_DENIED', 'Missing or invalid Authorization header',
                                'unknown', request.endpoint, request.remote_addr)
                return jsonify({"error": "Authorization token required"}), 401

            secret = secret_provider()
            if not secret:
                logger.error("ADMIN_JWT_SECRET no está configurado; se rechazan las rutas de administración.")
                return jsonify({"error": "Authorization token required"}), 401

            # 2. Verificar firma y expiración
            try:
                payload = jwt.decode(auth_header[7:], secret, algorithms=["HS256"])
            except jwt.InvalidTokenError as e:
                log_audit_event('ACCESS_DENIED', f'Invalid JWT token: {e}',
                                'unknown', request.endpoint, request.remote_addr)
                return jsonify({"error": "Invalid token"}), 401

            # 3. Validar el rol
            user_id = payload.get('sub', 'unknown')
            if payload.get('role') != ADMIN_ROLE:
                log_audit_event('ACCESS_DENIED', f"Role {payload.get('role')!r} is not admin",
                                user_id, request.endpoint, request.remote_addr)
                return jsonify({"error": "Forbidden"}), 403

            log_audit_event('ACCESS_GRANTED', 'admin', user_id, request.endpoint, request.remote_addr)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
