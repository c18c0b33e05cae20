# tests/conftest.py
import os
import sys
from datetime import date

import pytest

# so that `import app` works when pytest runs from the repo root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app  # noqa: E402
from config import TestingConfig  # noqa: E402
from extensions import db  # noqa: E402
from models import User  # noqa: E402
from permissions import ROLES  # noqa: E402

PASSWORD = "secret-pass"


@pytest.fixture()
def app():
    # every request gets its own app context, so g (unit of work, current user)
    # never leaks between requests made by one test
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def users(app):
    """One user per role: {"ADMIN": id, "MANAGER": id, ...}."""
    ids = {}
    with app.app_context():
        for role in ROLES:
            user = User(username=role.lower(), role=role)
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.commit()
            ids[role] = user.id
    return ids


def _authenticate(client, user_id: int) -> None:
    with client.session_transaction() as s:
        s["_user_id"] = str(user_id)
        s["_fresh"] = True


@pytest.fixture()
def login(client, users):
    def _login(role: str = "ADMIN") -> None:
        _authenticate(client, users[role])
    return _login


@pytest.fixture()
def make_equipment(app):
    from modules.equipment.models import Equipment

    def _make(**fields) -> str:
        with app.app_context():
            fields.setdefault("name", "Haas VF-2")
            fields.setdefault("model", "VF-2")
            fields.setdefault("serial_number", f"SN-{Equipment.query.count()}")
            fields.setdefault("location", "Bay 1")
            eq = Equipment(**fields)
            db.session.add(eq)
            db.session.commit()
            return eq.id
    return _make


@pytest.fixture()
def make_task(app):
    from modules.maintenance.models import MaintenanceTask

    def _make(equipment_id: str, **fields) -> str:
        with app.app_context():
            fields.setdefault("description", "Check way lube")
            task = MaintenanceTask(equipment_id=equipment_id, **fields)
            db.session.add(task)
            db.session.commit()
            return task.id
    return _make


@pytest.fixture()
def make_tool(app):
    from modules.metrology.models import MetrologyTool

    def _make(**fields) -> str:
        with app.app_context():
            fields.setdefault("name", "Micrometer 0-25")
            fields.setdefault("type", "Micrometer")
            fields.setdefault("serial_number", f"MIC-{MetrologyTool.query.count()}")
            fields.setdefault("calibration_interval_days", 365)
            tool = MetrologyTool(**fields)
            db.session.add(tool)
            db.session.commit()
            return tool.id
    return _make


@pytest.fixture()
def make_consumable(app):
    from modules.inventory.models import Consumable

    def _make(**fields) -> str:
        with app.app_context():
            fields.setdefault("name", "1/2 end mill")
            fields.setdefault("type", "End mill")
            fields.setdefault("location", "Tool crib")
            item = Consumable(**fields)
            db.session.add(item)
            db.session.commit()
            return item.id
    return _make


@pytest.fixture()
def day():
    return date(2024, 1, 15)
