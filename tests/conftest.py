import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from healthcare_api.database import Base  # noqa: E402
from healthcare_api.models.appointment import Appointment  # noqa: E402
from healthcare_api.models.availability import Availability  # noqa: E402
from healthcare_api.models.feedback import Feedback  # noqa: E402
from healthcare_api.models.user import User  # noqa: E402

TABLES = [User.__table__, Appointment.__table__, Availability.__table__, Feedback.__table__]


@pytest.fixture
def db_session():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=TABLES)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=TABLES)
        engine.dispose()


@pytest.fixture
def booked_appointment(db_session):
    appointment = Appointment(
        patient_id=2,
        caregiver_id=1,
        date_time=datetime(2026, 1, 5, 9, 0),
        status='Scheduled',
    )
    db_session.add(appointment)
    db_session.commit()
    db_session.refresh(appointment)
    return appointment
