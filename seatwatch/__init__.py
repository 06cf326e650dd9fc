import os

from flask import Flask
from werkzeug.utils import import_string

from .extensions import db, mail, migrate


def create_app(config_class='config.DevelopmentConfig', **collaborators):
    """Application factory.

    `collaborators` may inject `snapshots`, `queue` or `mailer` in place of the
    configured storage and Flask-Mail sender.
    """
    app = Flask(__name__)
    if isinstance(config_class, str):
        config_class = import_string(config_class)
    app.config.from_object(config_class)
    if hasattr(config_class, 'init_app'):
        config_class.init_app(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(__file__), '..', 'migrations'))
    mail.init_app(app)

    # Register blueprints
    from seatwatch.sensors.routes import sensors_bp
    from seatwatch.notifications.routes import notifications_bp
    from seatwatch.dispatch.routes import dispatch_bp
    from seatwatch.main.health import health_bp

    app.register_blueprint(sensors_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(dispatch_bp)
    app.register_blueprint(health_bp)

    from seatwatch.cli import register_commands
    register_commands(app)

    # Import models to ensure they are registered with SQLAlchemy
    with app.app_context():
        from seatwatch.sensors import models as sensor_models
        from seatwatch.notifications import models as notification_models
        if app.config.get('SEATWATCH_STORAGE', 'sql') == 'sql':
            db.create_all()

    from seatwatch.dispatch.services import init_seatwatch
    init_seatwatch(app, **collaborators)

    if app.config.get('DISPATCH_SCHEDULER_ENABLED'):
        from seatwatch.dispatch.scheduler import start_scheduler
        start_scheduler(app)

    return app
