import csv

import recorder.constants as constants
from heatmap.engine import HeatMapEngine
from recorder.session_recorder import SessionRecorder, to_timestamp
from utilities.db_utilities import AccelerometerData, Elevator, MaintenanceSession


def _parse_axis(value):
    if value is None or value.strip() == "":
        return None
    return float(value)


def read_samples_csv(path):
    """
    Yield (x, y, z, timestamp) tuples from a CSV file with a timestamp,x,y,z header.
    Blank axis cells come back as None and are treated as 0 by the engine.
    """
    with open(path, newline="") as csv_file:
        for row in csv.DictReader(csv_file):
            yield (
                _parse_axis(row.get(constants.CSV_X)),
                _parse_axis(row.get(constants.CSV_Y)),
                _parse_axis(row.get(constants.CSV_Z)),
                float(row[constants.CSV_TIMESTAMP]),
            )


def load_session_samples(session, session_id):
    return [
        (row.x, row.y, row.z, to_timestamp(row.recorded_at))
        for row in AccelerometerData.get_session_data(session, session_id)
    ]


def replay_session(session, session_id, timezone=None):
    """
    Rebuild the engine of a stored maintenance session from its accelerometer rows.
    """
    heatmap_engine = HeatMapEngine.replay(
        load_session_samples(session, session_id), timezone=timezone
    )
    maintenance_session = session.get(MaintenanceSession, session_id)
    if maintenance_session is not None and maintenance_session.start_time is not None:
        heatmap_engine.mark_started(to_timestamp(maintenance_session.start_time))
        if maintenance_session.end_time is not None:
            heatmap_engine.mark_finished(to_timestamp(maintenance_session.end_time))
    return heatmap_engine


def record_samples(session, samples, elevator_code, technician, timezone=None):
    """
    Store a complete maintenance session from (x, y, z, timestamp) tuples.
    :return: the maintenance session row and the engine report.
    """
    samples = list(samples)
    if not samples:
        raise ValueError("No samples to record")

    elevator = Elevator.get_or_create(session, elevator_code)
    session_recorder = SessionRecorder(
        session, elevator, technician, HeatMapEngine(timezone=timezone)
    )
    session_recorder.start(samples[0][3])
    for x, y, z, timestamp in samples:
        session_recorder.record_point(x, y, z, timestamp)
    report = session_recorder.finish(samples[-1][3])
    return session_recorder.maintenance_session, report


def render_report(report):
    summary = report["summary"]
    lines = [
        "Points: {0}  Floor changes: {1}  Floors visited: {2}  Duration: {3}s".format(
            summary.total_points,
            summary.total_floors,
            summary.floors_visited,
            summary.duration,
        )
    ]
    for step in report["path"]:
        lines.append(
            "{0:>3}. {1:<24} {2} ({3}s)".format(
                step.order, step.floor_name, step.time, step.duration
            )
        )
    for stats in report["analysis"]:
        lines.append("{0:<24} {1}s spent".format(stats.floor_name, round(stats.duration)))
    return lines
