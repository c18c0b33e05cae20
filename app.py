import json
import logging

from flask import Flask
from dotenv import load_dotenv
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db, login_manager  # noqa: E402  (load_dotenv needs to run first)
from repository import DatabaseError, DuplicateError, NotFoundError  # noqa: E402
from utils import api_error  # noqa: E402

logger = logging.getLogger(__name__)


def create_app(config_object=Config) -> Flask:
    """Application factory for the shop asset tracker."""

    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # init extensions
    db.init_app(app)
    login_manager.init_app(app)

    # blueprints
    from modules.auth import bp as auth_bp
    from modules.dashboard import bp as dashboard_bp
    from modules.equipment import bp as equipment_bp
    from modules.inventory import bp as inventory_bp
    from modules.machine_logs import bp as machine_logs_bp
    from modules.maintenance import bp as maintenance_bp
    from modules.metrology import bp as metrology_bp
    from modules.settings import bp as settings_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(equipment_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(machine_logs_bp)
    app.register_blueprint(maintenance_bp)
    app.register_blueprint(metrology_bp)
    app.register_blueprint(settings_bp)

    # DB
    with app.app_context():
        # models must be imported before create_all()
        from modules.equipment import models as equipment_models  # noqa: F401
        from modules.inventory import models as inventory_models  # noqa: F401
        from modules.machine_logs import models as machine_log_models  # noqa: F401
        from modules.maintenance import models as maintenance_models  # noqa: F401
        from modules.metrology import models as metrology_models  # noqa: F401
        from modules.settings import models as settings_models  # noqa: F401

        db.create_all()

    register_error_handlers(app)
    register_commands(app)
    return app


def register_error_handlers(app: Flask) -> None:
    from modules.maintenance.recurrence import InvalidTransitionError

    @app.errorhandler(ValidationError)
    def handle_validation(exc):
        return api_error("Validation error", 400, json.loads(exc.json(include_url=False)))

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc):
        return api_error(str(exc), 404)

    @app.errorhandler(DuplicateError)
    def handle_duplicate(exc):
        return api_error(str(exc), 409)

    @app.errorhandler(InvalidTransitionError)
    def handle_transition(exc):
        return api_error(str(exc), 409)

    @app.errorhandler(DatabaseError)
    def handle_database(exc):
        logger.error("Database error: %s", exc)
        return api_error(str(exc), 500)

    @app.errorhandler(HTTPException)
    def handle_http(exc):
        return api_error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.exception("Unhandled error")
        return api_error("Internal server error", 500)


def register_commands(app: Flask) -> None:
    @app.cli.command("refresh-statuses")
    def refresh_statuses():
        """Mark overdue maintenance tasks and refresh tool calibration statuses."""
        from modules.maintenance.recurrence import refresh_overdue_tasks
        from modules.metrology.calibration import refresh_calibration_statuses
        from repository import UnitOfWork
        from utils import today

        uow = UnitOfWork()
        lead_days = app.config.get("DUE_SOON_LEAD_DAYS", 7)
        tasks = refresh_overdue_tasks(uow, today(), lead_days)
        tools = refresh_calibration_statuses(uow, today(), lead_days)
        print(f"Updated {tasks} maintenance task(s) and {tools} metrology tool(s)")


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
