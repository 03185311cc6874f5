"""
Shared fixtures: an in-memory SQLite database per test, record factories,
and a TestClient wired to the same session.
"""
import os
import uuid
from datetime import date, time

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_marketplace_booking.db")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace_booking.config.database import get_db
from marketplace_booking.config.settings import get_settings
from marketplace_booking.main import app
from marketplace_booking.models import (
    Appointment,
    AppointmentStatus,
    AvailabilityRule,
    Base,
    BlockedDate,
    Business,
    Employee,
    ResourceType,
    Service,
)
from marketplace_booking.services.events.booking_events import booking_events

# 2026-10-19 is a Monday
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SUNDAY = date(2026, 10, 18)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_event_bus():
    booking_events.clear()
    yield
    booking_events.clear()


class Factory:
    """Small helpers for building booking records"""

    def __init__(self, db):
        self.db = db

    def business(self, owner_id=None, name="Test Studio", is_active=True):
        business = Business(owner_id=owner_id or uuid.uuid4(), name=name, is_active=is_active)
        self.db.add(business)
        self.db.commit()
        return business

    def service(self, business, name="Haircut", duration=30):
        service = Service(business_id=business.id, name=name, duration=duration)
        self.db.add(service)
        self.db.commit()
        return service

    def employee(self, business, name="Employee", services=(), user_id=None, is_active=True):
        employee = Employee(business_id=business.id, name=name, user_id=user_id, is_active=is_active)
        employee.services.extend(services)
        self.db.add(employee)
        self.db.commit()
        return employee

    def rule(self, resource, day_of_week, start, end, duration=30):
        rule = AvailabilityRule(
            resource_id=resource.id,
            resource_type=_resource_type(resource),
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            slot_duration_minutes=duration,
        )
        self.db.add(rule)
        self.db.commit()
        return rule

    def blocked(self, resource, day, reason=None):
        entry = BlockedDate(
            resource_id=resource.id,
            resource_type=_resource_type(resource),
            date=day,
            reason=reason,
        )
        self.db.add(entry)
        self.db.commit()
        return entry

    def appointment(self, resource, service, day, at, status=AppointmentStatus.PENDING, customer_id=None):
        business_id = resource.id if isinstance(resource, Business) else resource.business_id
        appointment = Appointment(
            business_id=business_id,
            service_id=service.id,
            customer_id=customer_id or uuid.uuid4(),
            resource_id=resource.id,
            resource_type=_resource_type(resource),
            date=day,
            time=at,
            status=AppointmentStatus(status).value,
        )
        self.db.add(appointment)
        self.db.commit()
        return appointment


def _resource_type(resource):
    if isinstance(resource, Business):
        return ResourceType.BUSINESS.value
    return ResourceType.EMPLOYEE.value


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def salon(factory):
    """Business with one service and two employees who both offer it"""
    owner_id = uuid.uuid4()
    business = factory.business(owner_id=owner_id)
    service = factory.service(business)
    anna = factory.employee(business, name="Anna", services=[service])
    ben = factory.employee(business, name="Ben", services=[service])
    return {
        "owner_id": owner_id,
        "business": business,
        "service": service,
        "anna": anna,
        "ben": ben,
    }


@pytest.fixture
def client(engine):
    SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = SessionTesting()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user_id):
    settings = get_settings()
    token = jwt.encode(
        {"sub": str(user_id)},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


def t(value):
    """Shorthand for wall-clock times in assertions"""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))
