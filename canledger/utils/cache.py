"""
Caching utilities
Uses Flask-Caching for the dashboard counters
"""

from flask_caching import Cache

cache = Cache()

DASHBOARD_KEY = 'dashboard'


def init_cache(app):
    """Initialize the cache with the Flask app"""
    cache.init_app(app)
    app.logger.info(f"Cache initialized with type: {app.config.get('CACHE_TYPE', 'SimpleCache')}")
    return cache


def cache_dashboard(timeout=None):
    """Cache dashboard data under a single key"""
    return cache.cached(timeout=timeout, key_prefix=DASHBOARD_KEY)


def invalidate_dashboard():
    """Drop cached dashboard counters after a write"""
    cache.delete(DASHBOARD_KEY)
