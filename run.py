"""
Application Entry Point
Initializes logging and runs the Flask application
"""

import os
import logging
from canledger import create_app, db

# Determine configuration environment
config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Setup logging
if not os.path.exists(app.config['LOG_FOLDER']):
    os.makedirs(app.config['LOG_FOLDER'])

logging.basicConfig(
    level=getattr(logging, app.config['LOG_LEVEL']),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.path.join(app.config['LOG_FOLDER'], 'app.log')),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in Flask shell"""
    from canledger import models
    return {
        'db': db,
        'Customer': models.Customer,
        'DailyUpdate': models.DailyUpdate,
        'MonthlyBill': models.MonthlyBill,
        'Price': models.Price,
        'Order': models.Order
    }


if __name__ == '__main__':
    is_dev = config_name == 'development'

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()
        logger.info("Database tables created")

        from canledger.services.price_service import seed_default_prices
        _, created = seed_default_prices()
        if created:
            logger.info("Default prices seeded")

    logger.info(f"Starting {app.config['BUSINESS_NAME']} ledger API...")
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('SERVER_PORT', 5000)),
        debug=is_dev
    )
