"""
WSGI Entry Point

Serve with any WSGI server, for example:
    gunicorn wsgi:application

DATABASE_URL and SECRET_KEY must be set in the environment or in .env
"""

import os

os.environ.setdefault('FLASK_ENV', 'production')

from canledger import create_app

application = create_app(os.environ['FLASK_ENV'])
