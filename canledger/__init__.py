"""
Flask Application Factory
Initializes and configures the CanLedger API
"""

from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import config
from canledger.errors import CanLedgerError
from canledger.models import db
from canledger.utils.cache import init_cache

# Initialize extensions
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name='default'):
    """
    Application factory pattern
    Creates and configures Flask application
    """
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    app.json.sort_keys = False
    app.url_map.strict_slashes = False

    # Validate secret key in production
    if config_name == 'production':
        if not app.config.get('SECRET_KEY') or app.config['SECRET_KEY'] == 'dev-secret-key-change-in-production':
            raise ValueError("Production requires a secure SECRET_KEY. Set it via environment variable.")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    init_cache(app)

    # Initialize Sentry if configured
    if app.config.get('SENTRY_DSN'):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=config_name
        )
        app.logger.info("Sentry error tracking initialized")

    # Register blueprints
    from canledger.routes.customers import bp as customers_bp
    app.register_blueprint(customers_bp, url_prefix='/api/customers')

    from canledger.routes.daily_updates import bp as daily_updates_bp, status_bp
    app.register_blueprint(daily_updates_bp, url_prefix='/api/daily-updates')
    app.register_blueprint(status_bp, url_prefix='/api/daily-can-status')

    from canledger.routes.bills import bp as bills_bp
    app.register_blueprint(bills_bp, url_prefix='/api/bills')

    from canledger.routes.orders import bp as orders_bp
    app.register_blueprint(orders_bp, url_prefix='/api/orders')

    from canledger.routes.settings import bp as settings_bp
    app.register_blueprint(settings_bp, url_prefix='/api/settings')

    from canledger.routes.dashboard import bp as dashboard_bp
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')

    @app.route('/health')
    @limiter.exempt
    def health():
        """Liveness check"""
        return jsonify({'ok': True})

    register_error_handlers(app)
    register_cli(app)

    return app


def register_error_handlers(app):
    """JSON error responses for the API"""
    from canledger.utils.error_logger import log_error

    @app.errorhandler(CanLedgerError)
    def handle_domain_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {error}")
        log_error(error)
        return jsonify({'error': 'Internal server error'}), 500


def register_cli(app):
    """Flask CLI commands"""
    import click

    @app.cli.command('init-db')
    def init_db():
        """Create tables and seed the default active prices"""
        from canledger.services.price_service import seed_default_prices
        db.create_all()
        _, created = seed_default_prices()
        click.echo("Database initialized" + (" (default prices seeded)" if created else ""))

    @app.cli.command('seed-prices')
    def seed_prices():
        """Seed the default active prices if none exist"""
        from canledger.services.price_service import seed_default_prices
        price, created = seed_default_prices()
        click.echo(f"{'Created' if created else 'Existing'} active prices: {price.to_dict()}")
