# order_intake/app.py
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv  # Necesario para cargar variables de entorno

# Cargar variables de entorno del archivo .env (si existe) antes de leer Config
load_dotenv()

from order_intake.config import Config
from order_intake.application.use_cases import SubmitOrderUseCase, UpdateStoreSettingsUseCase
from order_intake.domain.validation import OrderValidator
from order_intake.infrastructure.persistence.db_connector import init_db_pool
from order_intake.infrastructure.persistence.db_initializer import initialize_database
from order_intake.infrastructure.persistence.pg_repository import PgOrderRepository, PgStoreSettingsRepository
from order_intake.infrastructure.rate_limiting.in_memory_rate_limiter import InMemoryRateLimiter
from order_intake.infrastructure.web.flask_routes import create_api_blueprint
from order_intake.infrastructure.web.flask_store_settings_routes import create_store_settings_blueprint

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(config_object=Config, order_repository=None, settings_repository=None,
               rate_limiter=None, init_db=True):
    """Crea, configura y cablea la aplicación Flask siguiendo la Arquitectura Limpia."""

    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # --- INICIALIZACIÓN DE LA BASE DE DATOS ---
    if init_db:
        try:
            init_db_pool()
            initialize_database()
        except Exception:
            logger.exception("Fallo crítico al inicializar la BD.")
            raise

    # --- CABLEADO DE DEPENDENCIAS (Dependency Injection - DI) ---

    # 1. Infraestructura
    if order_repository is None:
        order_repository = PgOrderRepository()
    if settings_repository is None:
        settings_repository = PgStoreSettingsRepository()
    if rate_limiter is None:
        rate_limiter = InMemoryRateLimiter(
            max_per_window=app.config['RATE_LIMIT_MAX_PER_WINDOW'],
            window_seconds=app.config['RATE_LIMIT_WINDOW_SECONDS'],
            cleanup_interval=app.config['RATE_LIMIT_CLEANUP_INTERVAL_SECONDS'],
        )

    # 2. Capa de Aplicación (Use Cases)
    submit_order_use_case = SubmitOrderUseCase(
        order_repository=order_repository,
        rate_limiter=rate_limiter,
        validator=OrderValidator(enforce_total_price=app.config['ENFORCE_TOTAL_PRICE']),
    )
    update_settings_use_case = UpdateStoreSettingsUseCase(settings_repository=settings_repository)

    # Configurar CORS (también responde al preflight OPTIONS)
    CORS(app, resources={
        r"/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "OPTIONS"],
            "allow_headers": CORS_ALLOW_HEADERS,
            "expose_headers": ["Retry-After", "X-RateLimit-Remaining"],
            "send_wildcard": True,
        }
    })

    # 3. Capa de Presentación (Web)
    api_bp = create_api_blueprint(
        submit_order_use_case,
        trust_proxy_headers=app.config['TRUST_PROXY_HEADERS'],
    )
    app.register_blueprint(api_bp, url_prefix='/orders')

    settings_bp = create_store_settings_blueprint(
        update_settings_use_case,
        secret_provider=lambda: app.config.get('ADMIN_JWT_SECRET'),
    )
    app.register_blueprint(settings_bp, url_prefix='/store-settings')

    # --- Ruta de control ---
    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host=Config.APP_HOST, port=Config.APP_PORT, debug=False)
