"""
Pytest fixtures: in-memory database, HTTP client, users and a fake payment gateway.
"""

import json
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ticketbari.main import app
from ticketbari.database import Base, get_db
from ticketbari.exceptions import PaymentGatewayError
from ticketbari.models.ticket import Ticket, TicketStatus, TransportType
from ticketbari.models.user import User, UserRole
from ticketbari.routers.auth import limiter
from ticketbari.schemas.user import UserCreate
from ticketbari.services.auth import AuthService
from ticketbari.services.payment import CheckoutSession, GatewaySession, get_payment_gateway

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

limiter.enabled = False


class FakeGateway:
    """Stands in for Stripe Checkout; sessions are completed by calling ``complete``."""

    def __init__(self):
        self.sessions = {}
        self.created = []

    def create_checkout_session(self, amount, description, success_url, cancel_url, metadata):
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions[session_id] = GatewaySession(
            id=session_id,
            payment_status="unpaid",
            payment_reference=None,
            metadata=dict(metadata),
        )
        self.created.append({"id": session_id, "amount": amount, "description": description})
        return CheckoutSession(id=session_id, url=f"https://checkout.test/{session_id}")

    def retrieve_session(self, session_id):
        if session_id not in self.sessions:
            raise PaymentGatewayError("No such checkout session")
        return self.sessions[session_id]

    def complete(self, session_id):
        session = self.sessions[session_id]
        session.payment_status = "paid"
        session.payment_reference = f"pi_{session_id}"

    def construct_event(self, payload, signature):
        if signature != "valid-signature":
            raise ValueError("Invalid signature")
        return json.loads(payload)


@pytest.fixture
def db_session():
    """Create tables, yield session, then drop tables for isolation."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db_session, gateway):
    """HTTP client that overrides the DB and gateway dependencies."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_user(db, email, name, role=UserRole.USER) -> User:
    return AuthService.create_user(
        db,
        UserCreate(email=email, name=name, password="password123"),
        role=role,
    )


def auth_headers_for(user: User) -> dict:
    token = AuthService.create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


def make_ticket(db, vendor: User, quantity=10, price=500.0, status=TicketStatus.APPROVED, **overrides) -> Ticket:
    fields = dict(
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        vendor_email=vendor.email,
        title="Dhaka to Chittagong Express",
        from_location="Dhaka",
        to_location="Chittagong",
        transport_type=TransportType.BUS,
        price=price,
        quantity=quantity,
        departure_date=date(2026, 12, 1),
        departure_time="08:30",
        perks=["AC", "Water"],
        status=status,
    )
    fields.update(overrides)
    ticket = Ticket(**fields)
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket


@pytest.fixture
def buyer(db_session) -> User:
    return make_user(db_session, "buyer@mail.com", "Rahim Buyer")


@pytest.fixture
def other_buyer(db_session) -> User:
    return make_user(db_session, "second@mail.com", "Karim Buyer")


@pytest.fixture
def vendor(db_session) -> User:
    return make_user(db_session, "vendor@mail.com", "Green Line", role=UserRole.VENDOR)


@pytest.fixture
def admin(db_session) -> User:
    return make_user(db_session, "admin@mail.com", "Site Admin", role=UserRole.ADMIN)


@pytest.fixture
def buyer_headers(buyer) -> dict:
    return auth_headers_for(buyer)


@pytest.fixture
def other_buyer_headers(other_buyer) -> dict:
    return auth_headers_for(other_buyer)


@pytest.fixture
def vendor_headers(vendor) -> dict:
    return auth_headers_for(vendor)


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers_for(admin)


@pytest.fixture
def approved_ticket(db_session, vendor) -> Ticket:
    return make_ticket(db_session, vendor)
