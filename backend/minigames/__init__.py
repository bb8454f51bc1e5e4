from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from http import HTTPStatus
import click
from minigames.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    from minigames.storage import init_storage
    init_storage(flask_app)

    # Import and register blueprints here
    from minigames.main import main
    flask_app.register_blueprint(main)

    from minigames.api.game_list import game_list
    # Every game-type module hangs off /api/games/<slug>
    flask_app.register_blueprint(game_list, url_prefix='/api/games')

    register_error_handlers(flask_app)

    from minigames.models import User, Role

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        from minigames.responses import ErrorResponse
        return ErrorResponse(HTTPStatus.UNAUTHORIZED, 'Authentication required').to_response()

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = [('testuser1', Role.USER), ('testuser2', Role.USER), ('admin', Role.SUPER_ADMIN)]
            for username, role in users:
                user = User(username=username, role=role)
                user.set_password('password')
                db.session.add(user)

            seed_templates()
            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('seed-templates')
    def seed_templates_command():
        """Creates any missing game templates."""
        with flask_app.app_context():
            created = seed_templates()
            db.session.commit()
            print(f'Seeded {created} game template(s).')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_templates_command)

    return flask_app


def seed_templates():
    """Adds a template row for every known game type that is missing one.

    Returns the number of rows added; the caller commits.
    """
    from minigames.models import GameTemplate, GAME_TEMPLATES
    existing = {t.slug for t in GameTemplate.query.all()}
    created = 0
    for slug, name in GAME_TEMPLATES:
        if slug in existing:
            continue
        db.session.add(GameTemplate(slug=slug, name=name))
        created += 1
    return created


def register_error_handlers(flask_app):
    from minigames.responses import ErrorResponse, internal_error

    @flask_app.errorhandler(ErrorResponse)
    def handle_error_response(exc):
        return exc.to_response()

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        errors = [
            {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
            for err in exc.errors()
        ]
        return ErrorResponse(HTTPStatus.BAD_REQUEST, 'Validation error', errors).to_response()

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return ErrorResponse(exc.code or HTTPStatus.INTERNAL_SERVER_ERROR, exc.description).to_response()

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[unhandled] {exc}")
        db.session.rollback()
        return internal_error().to_response()
