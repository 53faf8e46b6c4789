import logging
from datetime import datetime

import numpy as np
import pytz

import heatmap.constants as heatmap_constants
import recorder.constants as constants
import utilities.common_constants as common_constants
from heatmap.engine import HeatMapEngine, get_floor_name, round_half_up, sample_intensity
from utilities.db_utilities import (
    AccelerometerData,
    FloorVisit,
    HeatmapSnapshot,
    MaintenanceSession,
)


logger = logging.getLogger(__name__)


class SessionStateError(Exception):
    pass


def to_datetime(timestamp):
    """
    Epoch milliseconds to an aware UTC datetime.
    """
    return datetime.fromtimestamp(timestamp / 1000, pytz.utc)


def to_timestamp(dt):
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return int(round(dt.timestamp() * 1000))


def density_grid(points, cells=constants.GRID_CELLS):
    """
    Count positioned samples per cell of a cells x cells grid over the car footprint.
    """
    grid, _, _ = np.histogram2d(
        [p.normalized_x for p in points],
        [p.normalized_y for p in points],
        bins=cells,
        range=[[0, heatmap_constants.CAR_WIDTH], [0, heatmap_constants.CAR_DEPTH]],
    )
    return grid.astype(int)


def build_snapshot(floor, points):
    return {
        common_constants.SNAPSHOT_JSON_FLOOR_NAME: get_floor_name(floor),
        common_constants.SNAPSHOT_JSON_POINTS: [
            {
                "x": p.normalized_x,
                "y": p.normalized_y,
                "intensity": p.intensity,
                "timestamp": p.timestamp,
            }
            for p in points
        ],
        common_constants.SNAPSHOT_JSON_GRID_CELLS: constants.GRID_CELLS,
        common_constants.SNAPSHOT_JSON_GRID: density_grid(points).tolist(),
    }


class SessionRecorder:
    """
    Host side of a maintenance visit.  Feeds readings into a HeatMapEngine and stores
    the readings, one floor_visits row per trajectory entry and, when the visit is
    finished, a heat map snapshot per floor.

    The caller owns the database session and commits it.
    """

    maintenance_session = None
    open_visit = None

    def __init__(self, session, elevator, technician, heatmap_engine=None):
        self.session = session
        self.elevator = elevator
        self.technician = technician
        self.engine = heatmap_engine if heatmap_engine is not None else HeatMapEngine()
        self._visit_enter_timestamp = None
        self._visit_intensities = []

    def start(self, timestamp):
        if self.maintenance_session is not None:
            raise SessionStateError(
                "Session {0} already started".format(self.maintenance_session.id)
            )

        self.engine.reset()
        self.engine.mark_started(timestamp)
        self.maintenance_session = MaintenanceSession(
            elevator_id=self.elevator.id,
            technician=self.technician,
            start_time=to_datetime(timestamp),
            status=common_constants.SESSION_STATUS_IN_PROGRESS,
        )
        self.session.add(self.maintenance_session)
        self.session.flush()
        logger.info(
            "Started maintenance session {0} on {1} for {2}".format(
                self.maintenance_session.id, self.elevator.elevator_code, self.technician
            )
        )
        return self.maintenance_session

    def record_point(self, x, y, z, timestamp):
        self._check_in_progress()

        previous_floor = self.engine.current_floor
        sample = self.engine.add_point(x, y, z, timestamp)
        self.session.add(
            AccelerometerData(
                session_id=self.maintenance_session.id,
                x=sample.x,
                y=sample.y,
                z=sample.z,
                magnitude=sample.magnitude,
                recorded_at=to_datetime(timestamp),
            )
        )

        if sample.floor != previous_floor:
            self._close_visit(timestamp)
            self._open_visit(sample)

        if self.open_visit is not None:
            self.open_visit.points_count += 1
            self._visit_intensities.append(sample_intensity(sample))

        return sample

    def finish(self, timestamp, notes=None):
        """
        Close the visit, store the heat map snapshots and return the engine report.
        """
        self._check_in_progress()

        self._close_visit(timestamp)
        self.engine.mark_finished(timestamp)

        self.maintenance_session.end_time = to_datetime(timestamp)
        self.maintenance_session.duration_seconds = self.engine.duration
        self.maintenance_session.status = common_constants.SESSION_STATUS_COMPLETED
        if notes is not None:
            self.maintenance_session.notes = notes

        report = self.engine.get_report()
        for floor, points in report["horizontal"].items():
            if points:
                self.session.add(
                    HeatmapSnapshot(
                        session_id=self.maintenance_session.id,
                        floor_number=floor,
                        heatmap_data=build_snapshot(floor, points),
                    )
                )

        self.elevator.last_maintenance = self.maintenance_session.end_time
        self.session.flush()

        summary = report["summary"]
        logger.info(
            "Finished maintenance session {0}: {1} points, {2} floors visited, {3}s".format(
                self.maintenance_session.id,
                summary.total_points,
                summary.floors_visited,
                summary.duration,
            )
        )
        return report

    def cancel(self, timestamp):
        self._check_in_progress()

        self._close_visit(timestamp)
        self.engine.mark_finished(timestamp)
        self.maintenance_session.end_time = to_datetime(timestamp)
        self.maintenance_session.duration_seconds = self.engine.duration
        self.maintenance_session.status = common_constants.SESSION_STATUS_CANCELLED
        self.session.flush()
        logger.info("Cancelled maintenance session {0}".format(self.maintenance_session.id))

    def resolve_issue(self, issue, notes, timestamp):
        if self.maintenance_session is None:
            raise SessionStateError("Cannot resolve an issue before the session starts")
        issue.resolve(self.maintenance_session, notes, to_datetime(timestamp))
        self.session.flush()
        logger.info(
            "Issue {0} resolved in session {1}".format(
                issue.fault_code, self.maintenance_session.id
            )
        )

    def _check_in_progress(self):
        if self.maintenance_session is None:
            raise SessionStateError("Session has not been started")
        if self.maintenance_session.status != common_constants.SESSION_STATUS_IN_PROGRESS:
            raise SessionStateError(
                "Session {0} is {1}".format(
                    self.maintenance_session.id, self.maintenance_session.status
                )
            )

    def _open_visit(self, sample):
        self.open_visit = FloorVisit(
            session_id=self.maintenance_session.id,
            floor_number=sample.floor,
            enter_time=to_datetime(sample.timestamp),
            points_count=0,
        )
        self.session.add(self.open_visit)
        self._visit_enter_timestamp = sample.timestamp
        self._visit_intensities = []

    def _close_visit(self, timestamp):
        if self.open_visit is None:
            return
        self.open_visit.exit_time = to_datetime(timestamp)
        self.open_visit.duration_seconds = round_half_up(
            (timestamp - self._visit_enter_timestamp) / 1000
        )
        self.open_visit.work_intensity = (
            round(float(np.mean(self._visit_intensities)), constants.INTENSITY_DECIMALS)
            if self._visit_intensities
            else 0
        )
        self.open_visit = None
        self._visit_enter_timestamp = None
        self._visit_intensities = []
