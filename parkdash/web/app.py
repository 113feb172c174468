# parkdash/web/app.py
import logging
from typing import Any, Dict, Optional

from flask import Flask, redirect, url_for

from .auth import auth_bp
from .dashboard import dashboard_bp
from ..stats.aggregator import StatsAggregator
from ..storage.base import DashboardStore
from ..storage.sqlite_storage import SQLiteDashboardStore

logger = logging.getLogger(__name__)


def create_app(config: Dict[str, Any],
               store: Optional[DashboardStore] = None,
               aggregator: Optional[StatsAggregator] = None) -> Flask:
    """Build the dashboard application around a detection store"""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = config['web']['secret_key']
    app.config['DASHBOARD'] = config['dashboard']

    if store is None:
        store = SQLiteDashboardStore(config['database']['path'])
        store.initialize()
    app.store = store
    app.aggregator = aggregator or StatsAggregator(
        store,
        spot_marker=config['dashboard']['spot_marker'],
        infractions_limit=config['dashboard']['infractions_limit']
    )

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)

    @app.route('/')
    def root():
        return redirect(url_for('dashboard.index'))

    logger.info("Initialized dashboard application")
    return app
