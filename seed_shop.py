# seed_shop.py
from datetime import date, timedelta

from due_dates import DEFAULT_LEAD_DAYS, tool_status_for
from extensions import db
from modules.equipment.models import Equipment
from modules.inventory.models import Consumable
from modules.maintenance.models import MaintenanceTask
from modules.metrology.models import MetrologyTool
from modules.settings.models import LOOKUP_TABLES

DEFAULT_LOOKUPS = {
    "locations": ["Shop Floor A", "Shop Floor B", "Storage Room 1", "Inspection Lab"],
    "manufacturers": ["Haas", "DMG Mori", "Okuma", "Mazak", "Mitutoyo", "Starrett"],
    "metrology-tool-types": ["Caliper", "Micrometer", "Height Gauge", "Surface Plate", "Gauge Blocks"],
    "consumable-materials": ["HSS", "Carbide", "Cobalt", "PCD"],
    "consumable-types": ["End Mill", "Drill Bit", "Lathe Insert", "Reamer", "Tap"],
}


def run():
    today = date.today()

    eq = Equipment.query.filter_by(serial_number="HAAS-VF2-0001").first()
    if not eq:
        eq = Equipment(name="Haas VF-2", model="VF-2", serial_number="HAAS-VF2-0001",
                       location="Bay 1", purchase_date=date(2021, 3, 15))
        db.session.add(eq)
        db.session.flush()

    if not MaintenanceTask.query.filter_by(equipment_id=eq.id).first():
        db.session.add(MaintenanceTask(
            equipment_id=eq.id,
            description="Way lube and coolant concentration check",
            frequency_days=7,
            next_due_date=today,
            assigned_to="Maintenance",
        ))
        db.session.add(MaintenanceTask(
            equipment_id=eq.id,
            description="Spindle taper inspection",
            frequency_days=90,
            last_performed_date=today - timedelta(days=80),
            next_due_date=today + timedelta(days=10),
        ))

    tool = MetrologyTool.query.filter_by(serial_number="MIT-293-0042").first()
    if not tool:
        last = today - timedelta(days=360)
        next_due = last + timedelta(days=365)
        db.session.add(MetrologyTool(
            name="Digital micrometer 0-25 mm", type="Micrometer", serial_number="MIT-293-0042",
            manufacturer="Mitutoyo", calibration_interval_days=365,
            last_calibration_date=last, next_calibration_date=next_due,
            location="QC lab", status=tool_status_for(next_due, today, DEFAULT_LEAD_DAYS),
        ))

    rows = [
        ("1/2\" 3FL carbide end mill", "End mill", "Carbide", "12.7 mm", 3, 5),
        ("CNMG 432 insert", "Insert", "Coated carbide", "CNMG 432", 40, 20),
        ("#7 jobber drill", "Drill", "HSS", "5.1 mm", 12, 6),
    ]
    for name, type_, material, size, qty, min_qty in rows:
        if Consumable.query.filter_by(name=name).first():
            continue
        db.session.add(Consumable(name=name, type=type_, material=material, size=size,
                                  quantity=qty, min_quantity=min_qty, location="Tool crib"))

    for kind, names in DEFAULT_LOOKUPS.items():
        model, _ = LOOKUP_TABLES[kind]
        for name in names:
            if not model.query.filter_by(name=name).first():
                db.session.add(model(name=name))

    db.session.commit()
    print("Seed OK: HAAS-VF2-0001 with two tasks, one micrometer, three consumables, default settings.")


if __name__ == "__main__":
    from app import create_app

    with create_app().app_context():
        run()
