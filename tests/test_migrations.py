from unittest import TestCase

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from migrations.add_medicine_schedule_version import downgrade, upgrade


class AddMedicineScheduleVersionTest(TestCase):
    def setUp(self):
        # One shared in-memory database for every connection
        self.engine = create_engine("sqlite://", poolclass=StaticPool)
        with self.engine.connect() as conn:
            conn.execute(
                text(
                    "CREATE TABLE medicine_schedules ("
                    "id INTEGER PRIMARY KEY, patient_id INTEGER NOT NULL, "
                    "start_date DATE NOT NULL, number_of_days INTEGER NOT NULL)"
                )
            )
            conn.execute(
                text(
                    "INSERT INTO medicine_schedules (id, patient_id, start_date, number_of_days) "
                    "VALUES (1, 1, '2024-01-01', 10)"
                )
            )
            conn.commit()

    def tearDown(self):
        self.engine.dispose()

    def columns(self):
        with self.engine.connect() as conn:
            return {c["name"] for c in inspect(conn).get_columns("medicine_schedules")}

    def test_upgrade_adds_column_with_default(self):
        upgrade(self.engine)

        self.assertIn("version", self.columns())
        with self.engine.connect() as conn:
            version = conn.execute(
                text("SELECT version FROM medicine_schedules WHERE id = 1")
            ).scalar()
        self.assertEqual(version, 1)

    def test_upgrade_is_idempotent(self):
        upgrade(self.engine)
        upgrade(self.engine)
        self.assertIn("version", self.columns())

    def test_downgrade(self):
        upgrade(self.engine)
        downgrade(self.engine)
        self.assertNotIn("version", self.columns())
