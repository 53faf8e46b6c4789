import json
import unittest
from datetime import datetime

import pytz

from utilities import common_constants
from utilities.db_utilities import Base, Elevator, Issue, Session, create_tables, engine


class TestUtilities:
    start_timestamp = 1700000000000  # 2023-11-14 22:13:20 UTC, in milliseconds
    sample_spacing = 300  # Units of milliseconds, the capture rate of the phone sensor

    def __init__(self, session=None):
        self.session = session

    def set_config(self, config):
        with open(common_constants.CONFIG_FILE_NAME, "w") as cf:
            json.dump(config, cf)

    def delete_all_data(self):
        with engine.begin() as con:
            for table in reversed(Base.metadata.sorted_tables):
                con.execute(table.delete())

    def timestamp(self, index):
        return self.start_timestamp + index * self.sample_spacing

    def create_elevator(self, elevator_code="ELV-001", name="Tower A", location="Helsinki Central"):
        elevator = Elevator(elevator_code=elevator_code, name=name, location=location)
        self.session.add(elevator)
        self.session.flush()
        return elevator

    def create_issue(self, elevator, fault_code="F-042", severity=common_constants.ISSUE_SEVERITY_HIGH):
        issue = Issue(
            elevator_id=elevator.id,
            fault_code=fault_code,
            description="Door operator noise",
            severity=severity,
            status=common_constants.ISSUE_STATUS_OPEN,
            reported_at=datetime.now(pytz.utc),
        )
        self.session.add(issue)
        self.session.flush()
        return issue

    def visit_samples(self, moves, still_samples=10):
        """
        Samples for a visit made of vertical moves.  Each move is one z reading followed by
        still_samples readings with no vertical acceleration.
        :return: list of (x, y, z, timestamp)
        """
        samples = []
        for z in moves:
            samples.append((0.1, -0.1, z, self.timestamp(len(samples))))
            for i in range(still_samples):
                x = 0.3 if i % 2 else -0.2
                samples.append((x, 0.1 * i, 0.05, self.timestamp(len(samples))))
        return samples


class SessionTestCase(unittest.TestCase):
    session = None

    def setUp(self):
        create_tables()
        self.session = Session()

    def tearDown(self):
        self.session.rollback()
        self.session.close()
