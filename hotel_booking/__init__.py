import logging.config

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_mail import Mail
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
mail = Mail()
limiter = Limiter(key_func=get_remote_address)


def configure_logging(level):
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
            },
        },
        'loggers': {
            'hotel_booking': {'handlers': ['console'], 'level': level, 'propagate': False},
        },
        'root': {'handlers': ['console'], 'level': 'WARNING'},
    })


def create_app(config_object='hotel_booking.config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config['LOG_LEVEL'])

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)
    limiter.init_app(app)

    with app.app_context():
        from hotel_booking import auth, errors, routes, cli

        auth.register_jwt_callbacks(jwt)
        errors.register_error_handlers(app)
        app.register_blueprint(routes.api)
        cli.register_commands(app)

        db.create_all()  # Crear tablas si no existen

    return app
