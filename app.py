# app.py

from flask import Flask, session, request
from flask_socketio import join_room
import logging
from datetime import timedelta

import config
from extensions import socketio, ALERTS_ROOM
from database import get_user_by_id

# --- Import Blueprints from the 'routes' package ---
# These blueprints contain the organized routes for different
# parts of the application.
from routes.auth_routes import auth_bp
from routes.project_routes import project_bp
from routes.sample_routes import sample_bp
from routes.alerts_routes import alerts_bp
from routes.report_routes import report_bp

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """
    Creates and configures the Flask application.
    This factory pattern is useful for testing and scalability.
    """
    app = Flask(__name__)

    app.config['SECRET_KEY'] = config.SECRET_KEY
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(minutes=config.SESSION_TIMEOUT_MINUTES)
    if test_config:
        app.config.update(test_config)

    @app.before_request
    def before_request_tasks():
        # Drop sessions whose user no longer exists, and keep the timeout sliding.
        session.permanent = True
        if 'user_id' in session and get_user_by_id(session['user_id']) is None:
            session.clear()

    # --- Register Blueprints ---
    # All JSON endpoints live under /api.
    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(project_bp, url_prefix='/api')
    app.register_blueprint(sample_bp, url_prefix='/api')
    app.register_blueprint(alerts_bp, url_prefix='/api')
    app.register_blueprint(report_bp, url_prefix='/api')

    # Initialize SocketIO with the app
    socketio.init_app(app)

    return app


@socketio.on('join_alerts')
def handle_join_alerts_event(data=None):
    """Subscribes a dashboard client to new-alert broadcasts."""
    logger.info("Client %s joined the '%s' room.", request.sid, ALERTS_ROOM)
    join_room(ALERTS_ROOM)


# --- App Execution ---
# This section allows the Flask app to be run directly or by a WSGI server.
app = create_app()
