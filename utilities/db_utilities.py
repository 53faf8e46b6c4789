from contextlib import contextmanager

import pytz
from sqlalchemy import (
    create_engine,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    types,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import JSON

from utilities import common_constants


engine = create_engine(common_constants.DB_CONNECTION)
Session = sessionmaker(bind=engine)


@contextmanager
def session_scope():
    session = Session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


class UTCDateTime(types.TypeDecorator):

    impl = types.DateTime
    cache_ok = True

    def process_bind_param(self, value, engine):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(pytz.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, engine):
        if value is not None:
            return value.replace(tzinfo=pytz.utc)


Base = declarative_base()


def one_of(column, values):
    return CheckConstraint(
        "{0} IN ({1})".format(column, ", ".join("'{0}'".format(v) for v in values))
    )


def create_tables():
    Base.metadata.create_all(engine)


class Elevator(Base):
    __tablename__ = "elevators"
    __table_args__ = (one_of("status", common_constants.ELEVATOR_STATUSES),)

    id = Column(Integer, primary_key=True)
    elevator_code = Column(String(20), unique=True, nullable=False)  # ELV-001, ELV-002, ...
    name = Column(String(255))
    location = Column(String(255))
    total_floors = Column(Integer, default=12)
    car_width = Column(Numeric(5, 2), default=1.5)
    car_depth = Column(Numeric(5, 2), default=1.5)
    floor_height = Column(Numeric(5, 2), default=3)
    status = Column(String(50), default=common_constants.ELEVATOR_STATUS_ACTIVE)
    last_maintenance = Column(UTCDateTime)

    @classmethod
    def get_by_code(cls, session, elevator_code):
        return session.query(cls).filter(cls.elevator_code == elevator_code).first()

    @classmethod
    def get_or_create(cls, session, elevator_code):
        elevator = cls.get_by_code(session, elevator_code)
        if elevator is None:
            elevator = cls(
                elevator_code=elevator_code,
                name=elevator_code,
                status=common_constants.ELEVATOR_STATUS_ACTIVE,
            )
            session.add(elevator)
            session.flush()
        return elevator


class MaintenanceSession(Base):
    __tablename__ = "maintenance_sessions"
    __table_args__ = (one_of("status", common_constants.SESSION_STATUSES),)

    id = Column(Integer, primary_key=True)
    elevator_id = Column(Integer, ForeignKey("elevators.id"), nullable=False)
    technician = Column(String(255), nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime)
    status = Column(
        String(50), nullable=False, default=common_constants.SESSION_STATUS_IN_PROGRESS
    )
    duration_seconds = Column(Integer)
    notes = Column(Text)

    @classmethod
    def get_active_session(cls, session, technician):
        return (
            session.query(cls)
            .filter(cls.technician == technician)
            .filter(cls.status == common_constants.SESSION_STATUS_IN_PROGRESS)
            .order_by(cls.start_time.desc())
            .first()
        )

    @classmethod
    def get_recent_sessions(cls, session, technician, limit=10):
        return (
            session.query(cls)
            .filter(cls.technician == technician)
            .order_by(cls.start_time.desc())
            .limit(limit)
            .all()
        )


class AccelerometerData(Base):
    __tablename__ = "accelerometer_data"

    id = Column(Integer, primary_key=True)
    session_id = Column(
        Integer, ForeignKey("maintenance_sessions.id", ondelete="CASCADE"), nullable=False
    )
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    z = Column(Float, nullable=False)  # Vertical axis
    magnitude = Column(Float)
    recorded_at = Column(UTCDateTime, nullable=False)

    @classmethod
    def get_session_data(cls, session, session_id):
        return (
            session.query(cls)
            .filter(cls.session_id == session_id)
            .order_by(cls.recorded_at.asc(), cls.id.asc())
            .all()
        )


class FloorVisit(Base):
    __tablename__ = "floor_visits"

    id = Column(Integer, primary_key=True)
    session_id = Column(
        Integer, ForeignKey("maintenance_sessions.id", ondelete="CASCADE"), nullable=False
    )
    floor_number = Column(Integer, nullable=False)
    enter_time = Column(UTCDateTime, nullable=False)
    exit_time = Column(UTCDateTime)
    duration_seconds = Column(Integer)
    work_intensity = Column(Numeric(3, 2))  # 0-1 scale
    points_count = Column(Integer, default=0)

    @classmethod
    def get_floor_visits(cls, session, session_id):
        return (
            session.query(cls)
            .filter(cls.session_id == session_id)
            .order_by(cls.enter_time.asc(), cls.id.asc())
            .all()
        )


class HeatmapSnapshot(Base):
    __tablename__ = "heatmap_snapshots"

    id = Column(Integer, primary_key=True)
    session_id = Column(
        Integer, ForeignKey("maintenance_sessions.id", ondelete="CASCADE"), nullable=False
    )
    floor_number = Column(Integer, nullable=False)
    heatmap_data = Column(JSON, nullable=False)

    @classmethod
    def get_snapshot(cls, session, session_id, floor_number):
        return (
            session.query(cls)
            .filter(cls.session_id == session_id)
            .filter(cls.floor_number == floor_number)
            .order_by(cls.id.desc())
            .first()
        )


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (
        one_of("severity", common_constants.ISSUE_SEVERITIES),
        one_of("status", common_constants.ISSUE_STATUSES),
    )

    id = Column(Integer, primary_key=True)
    elevator_id = Column(Integer, ForeignKey("elevators.id"), nullable=False)
    fault_code = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    severity = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False, default=common_constants.ISSUE_STATUS_OPEN)
    reported_at = Column(UTCDateTime, nullable=False)
    resolved_at = Column(UTCDateTime)
    resolved_by = Column(String(255))
    resolution_notes = Column(Text)
    session_id = Column(Integer, ForeignKey("maintenance_sessions.id"))

    @classmethod
    def get_open_issues(cls, session, elevator_id):
        return (
            session.query(cls)
            .filter(cls.elevator_id == elevator_id)
            .filter(cls.status != common_constants.ISSUE_STATUS_CLOSED)
            .order_by(cls.reported_at.desc())
            .all()
        )

    def resolve(self, maintenance_session, notes, resolved_at):
        """
        Marks the issue resolved by the given maintenance session.
        """
        self.status = common_constants.ISSUE_STATUS_RESOLVED
        self.resolved_at = resolved_at
        self.resolved_by = maintenance_session.technician
        self.session_id = maintenance_session.id
        self.resolution_notes = notes
