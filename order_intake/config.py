# order_intake/config.py
import os


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.environ.get(env_name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


class Config:
    """Configuración del servicio de pedidos, leída de variables de entorno."""
    # App
    APP_HOST = os.environ.get('APP_HOST', '0.0.0.0')
    APP_PORT = int(os.environ.get('APP_PORT', '8080'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Base de datos (PostgreSQL). Credencial privilegiada: solo vive en el servidor.
    DB_HOST = os.environ.get('DB_HOST', 'localhost')
    DB_PORT = os.environ.get('DB_PORT', '5432')
    DB_NAME = os.environ.get('DB_NAME', 'postgres')
    DB_USER = os.environ.get('DB_USER', 'postgres')
    DB_PASSWORD = os.environ.get('DB_PASSWORD', 'postgres')
    DB_POOL_MIN = int(os.environ.get('DB_POOL_MIN', '1'))
    DB_POOL_MAX = int(os.environ.get('DB_POOL_MAX', '10'))
    DB_CONNECT_TIMEOUT = int(os.environ.get('DB_CONNECT_TIMEOUT', '5'))
    DB_STATEMENT_TIMEOUT_MS = int(os.environ.get('DB_STATEMENT_TIMEOUT_MS', '10000'))
    RUN_DB_INIT_ON_STARTUP = _get_bool('RUN_DB_INIT_ON_STARTUP', False)

    # Límite de pedidos por IP
    RATE_LIMIT_MAX_PER_WINDOW = int(os.environ.get('RATE_LIMIT_MAX_PER_WINDOW', '5'))
    RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get('RATE_LIMIT_WINDOW_SECONDS', '600'))
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS = int(os.environ.get('RATE_LIMIT_CLEANUP_INTERVAL_SECONDS', '300'))
    # Solo es correcto detrás de un proxy inverso de confianza
    TRUST_PROXY_HEADERS = _get_bool('TRUST_PROXY_HEADERS', True)

    # Si es True se rechazan pedidos donde total != producto + envío
    ENFORCE_TOTAL_PRICE = _get_bool('ENFORCE_TOTAL_PRICE', False)

    # Secreto HS256 para los tokens de administración
    ADMIN_JWT_SECRET = os.environ.get('ADMIN_JWT_SECRET', '')
