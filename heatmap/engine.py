import logging
import math
from collections import namedtuple, OrderedDict
from datetime import datetime

import pytz

import heatmap.constants as constants
import utilities.common_constants as common_constants


logger = logging.getLogger(__name__)

# One accelerometer reading.  floor is the floor detected when it was ingested.
Sample = namedtuple("Sample", ["x", "y", "z", "timestamp", "magnitude", "floor"])

# One floor change.  duration stays 0, consumers derive it from the next entry.
TrajectoryEntry = namedtuple("TrajectoryEntry", ["floor", "timestamp", "duration"])

# A sample placed inside the car footprint for a horizontal heat map.
PositionedSample = namedtuple(
    "PositionedSample", Sample._fields + ("normalized_x", "normalized_y", "intensity")
)

FloorStats = namedtuple(
    "FloorStats", ["floor", "floor_name", "duration", "visits", "last_visit"]
)

PathStep = namedtuple("PathStep", ["order", "floor", "floor_name", "time", "duration"])

SessionSummary = namedtuple(
    "SessionSummary",
    [
        "total_points",
        "total_floors",
        "start_floor",
        "end_floor",
        "floors_visited",
        "duration",
    ],
)

SessionState = namedtuple(
    "SessionState",
    ["points", "trajectory", "current_floor", "duration", "start_time", "end_time"],
)

EMPTY_STATE = SessionState(
    points=(),
    trajectory=(),
    current_floor=constants.MIN_FLOOR,
    duration=0,
    start_time=None,
    end_time=None,
)


def round_half_up(value):
    return int(math.floor(value + 0.5))


def coerce_axis(value):
    if value is None:
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    return value


def detect_floor(z, current_floor):
    """
    Estimate the floor after a vertical acceleration of z, starting from current_floor.
    Positive z is going up, negative z is going down.

    The distance moved is |z| integrated over a fixed FLOOR_TRANSITION_TIME_MS window,
    so one large reading can move several floors at once.  Only the [0, 12] clamp
    limits the jump.
    :param z: vertical acceleration in m/s^2
    :param current_floor: the floor to move from
    :return: floor number, 0 = car top, 1-12 = building floors
    """
    # If no movement, assume still on current floor
    if abs(z) < constants.VERTICAL_THRESHOLD:
        return current_floor

    vertical_distance = abs(z) * constants.FLOOR_TRANSITION_TIME_MS / 1000
    if math.isinf(vertical_distance):
        # Off the scale, straight to the end of the shaft
        return constants.MAX_FLOOR if z > 0 else constants.MIN_FLOOR
    floor_change = round_half_up(vertical_distance / constants.FLOOR_HEIGHT)

    if z > 0:
        return min(current_floor + floor_change, constants.MAX_FLOOR)
    else:
        return max(current_floor - floor_change, constants.MIN_FLOOR)


def _ingest(current_floor, x, y, z, timestamp):
    """
    :return: the Sample for one reading, and the TrajectoryEntry it starts or None
             when the car stays on current_floor.
    """
    x = coerce_axis(x)
    y = coerce_axis(y)
    z = coerce_axis(z)
    floor = detect_floor(z, current_floor)
    sample = Sample(
        x=x,
        y=y,
        z=z,
        timestamp=timestamp,
        magnitude=math.sqrt(x * x + y * y + z * z),
        floor=floor,
    )
    if floor == current_floor:
        return sample, None
    return sample, TrajectoryEntry(floor, timestamp, 0)


def apply_sample(state, x, y, z, timestamp):
    """
    Fold one accelerometer reading into the session state.
    :return: (new state, the ingested Sample).  The given state is never modified.
    """
    sample, entry = _ingest(state.current_floor, x, y, z, timestamp)
    trajectory = state.trajectory
    if entry is not None:
        trajectory = trajectory + (entry,)

    new_state = state._replace(
        points=state.points + (sample,), trajectory=trajectory, current_floor=sample.floor
    )
    return new_state, sample


def fold_samples(samples, state=EMPTY_STATE):
    """
    Replay (x, y, z, timestamp) tuples on top of state and return the final state.
    Gives the same result as chaining apply_sample, without copying the point
    tuple for every reading.
    """
    points = list(state.points)
    trajectory = list(state.trajectory)
    current_floor = state.current_floor
    for x, y, z, timestamp in samples:
        sample, entry = _ingest(current_floor, x, y, z, timestamp)
        points.append(sample)
        if entry is not None:
            trajectory.append(entry)
        current_floor = sample.floor

    return state._replace(
        points=tuple(points), trajectory=tuple(trajectory), current_floor=current_floor
    )


def get_floor_name(floor):
    if floor == 0:
        return constants.FLOOR_NAME_CAR_TOP
    if 1 <= floor <= constants.MAX_FLOOR:
        return constants.FLOOR_NAME_FORMAT.format(floor)
    return constants.FLOOR_NAME_UNKNOWN


def format_elapsed(seconds):
    """
    Format a recording timer as MM:SS.
    """
    seconds = int(seconds)
    return "{0:02d}:{1:02d}".format(seconds // 60, seconds % 60)


def sample_intensity(sample):
    return min(sample.magnitude / constants.INTENSITY_SCALE, 1)


def _normalize(value, max_accel, half_size):
    # All points of the floor were still, put them in the middle of the car.
    if max_accel == 0:
        return half_size
    if math.isinf(max_accel):
        # Infinite readings go against the wall they point to, the rest to the middle.
        ratio = math.copysign(1, value) if math.isinf(value) else 0
    else:
        ratio = value / max_accel
    return ratio * half_size + half_size


def _seconds_to_next(trajectory, index):
    if index < len(trajectory) - 1:
        return (trajectory[index + 1].timestamp - trajectory[index].timestamp) / 1000
    return 0


class HeatMapEngine:
    """
    Turns accelerometer readings recorded during a maintenance visit into the floors
    the car travelled to, and derives heat maps and statistics from that trajectory.

    One engine holds one session.  It is not thread safe: feed add_point from a single
    writer, or hold a lock around every call if several threads share the engine.
    The get_* methods never change the session.
    """

    def __init__(self, timezone=None, state=EMPTY_STATE):
        self.timezone = pytz.timezone(timezone or common_constants.LOCAL_TIMEZONE)
        self._load(state)

    @classmethod
    def replay(cls, samples, timezone=None):
        return cls(timezone=timezone, state=fold_samples(samples))

    @property
    def state(self):
        """
        Immutable copy of the session, see apply_sample.
        """
        return SessionState(
            points=tuple(self._points),
            trajectory=tuple(self._trajectory),
            current_floor=self._current_floor,
            duration=self._duration,
            start_time=self._start_time,
            end_time=self._end_time,
        )

    @property
    def points(self):
        return tuple(self._points)

    @property
    def trajectory(self):
        return tuple(self._trajectory)

    @property
    def current_floor(self):
        return self._current_floor

    @property
    def duration(self):
        return self._duration

    @property
    def start_time(self):
        return self._start_time

    @property
    def end_time(self):
        return self._end_time

    def add_point(self, x, y, z, timestamp):
        previous_floor = self._current_floor
        sample, entry = _ingest(previous_floor, x, y, z, timestamp)
        self._points.append(sample)
        if entry is not None:
            self._trajectory.append(entry)
            self._current_floor = entry.floor
            logger.debug(
                "Floor change {0} -> {1} at {2}".format(
                    previous_floor, entry.floor, timestamp
                )
            )
        return sample

    def detect_floor(self, z):
        return detect_floor(coerce_axis(z), self._current_floor)

    def mark_started(self, timestamp):
        self._start_time = timestamp
        self._end_time = None
        self._duration = 0

    def mark_finished(self, timestamp):
        duration = 0
        if self._start_time is not None:
            duration = round_half_up((timestamp - self._start_time) / 1000)
        self._end_time = timestamp
        self._duration = duration

    def get_floor_name(self, floor):
        return get_floor_name(floor)

    def get_floor_heatmap(self, floor):
        """
        Horizontal heat map for one floor: the X, Y accelerations of the floor's
        samples scaled into the CAR_WIDTH x CAR_DEPTH footprint.
        """
        floor_points = [p for p in self._points if p.floor == floor]
        if not floor_points:
            return []

        max_accel = max(max(abs(p.x), abs(p.y)) for p in floor_points)
        half_width = constants.CAR_WIDTH / 2
        half_depth = constants.CAR_DEPTH / 2

        return [
            PositionedSample(
                *p,
                normalized_x=_normalize(p.x, max_accel, half_width),
                normalized_y=_normalize(p.y, max_accel, half_depth),
                intensity=sample_intensity(p)
            )
            for p in floor_points
        ]

    def get_vertical_heatmap(self):
        """
        Visits and time spent for every floor, in floor order.  Time on the floor of
        the latest trajectory entry is still running and is not counted.
        """
        trajectory = self._trajectory
        durations = {floor: 0 for floor in range(constants.MIN_FLOOR, constants.MAX_FLOOR + 1)}
        visits = dict.fromkeys(durations, 0)
        last_visits = dict.fromkeys(durations)

        for index, visit in enumerate(trajectory):
            if visit.floor not in durations:
                continue
            visits[visit.floor] += 1
            last_visits[visit.floor] = visit.timestamp
            durations[visit.floor] += _seconds_to_next(trajectory, index)

        return OrderedDict(
            (
                floor,
                FloorStats(
                    floor=floor,
                    floor_name=get_floor_name(floor),
                    duration=durations[floor],
                    visits=visits[floor],
                    last_visit=last_visits[floor],
                ),
            )
            for floor in sorted(durations)
        )

    def get_workflow_analysis(self):
        """
        Floors where time was spent, longest first.  Equal times are listed lowest
        floor first.
        """
        return sorted(
            (stats for stats in self.get_vertical_heatmap().values() if stats.duration > 0),
            key=lambda stats: (-stats.duration, stats.floor),
        )

    def get_path(self):
        trajectory = self._trajectory
        return [
            PathStep(
                order=index + 1,
                floor=visit.floor,
                floor_name=get_floor_name(visit.floor),
                time=self._format_time(visit.timestamp),
                duration=round_half_up(_seconds_to_next(trajectory, index)),
            )
            for index, visit in enumerate(trajectory)
        ]

    def get_summary(self):
        trajectory = self._trajectory
        return SessionSummary(
            total_points=len(self._points),
            total_floors=len(trajectory),
            start_floor=trajectory[0].floor if trajectory else constants.MIN_FLOOR,
            end_floor=trajectory[-1].floor if trajectory else constants.MIN_FLOOR,
            floors_visited=len({visit.floor for visit in trajectory}),
            duration=self._duration,
        )

    def get_report(self):
        """
        Everything shown after a recording: both heat maps, summary, ranking and path.
        """
        vertical = self.get_vertical_heatmap()
        return {
            "vertical": vertical,
            "horizontal": OrderedDict(
                (floor, self.get_floor_heatmap(floor)) for floor in vertical
            ),
            "summary": self.get_summary(),
            "analysis": self.get_workflow_analysis(),
            "path": self.get_path(),
        }

    def reset(self):
        logger.debug("Resetting session after {0} points".format(len(self._points)))
        self._load(EMPTY_STATE)

    def _format_time(self, timestamp):
        try:
            local_time = datetime.fromtimestamp(timestamp / 1000, self.timezone)
        except (ValueError, OverflowError, OSError):
            # Not epoch milliseconds, show the raw value
            return str(timestamp)
        return local_time.strftime(constants.PATH_TIME_FORMAT)

    def _load(self, state):
        self._points = list(state.points)
        self._trajectory = list(state.trajectory)
        self._current_floor = state.current_floor
        self._duration = state.duration
        self._start_time = state.start_time
        self._end_time = state.end_time
