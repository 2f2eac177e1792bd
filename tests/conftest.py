import pytest
from datetime import date, timedelta
from decimal import Decimal

from storefront import create_app
from storefront.extensions import db as _db
from storefront.models import User, Tour, Space
from storefront.models.enums import MembershipTier, UserRole
from storefront.services.membership import build_membership_config
from config import Config

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key'
    CANCELLATION_HOURS = 72
    LOG_LEVEL = 'WARNING'

@pytest.fixture
def app():
    app = create_app(TestConfig)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def runner(app):
    return app.test_cli_runner()

@pytest.fixture
def db(app):
    return _db

@pytest.fixture
def membership_config():
    return build_membership_config()

@pytest.fixture
def make_user(db):
    def _make_user(email='socio@example.com', tier=MembershipTier.NONE, used_km=0,
                   space_uses=0, role=UserRole.USER):
        user = User(
            email=email,
            name='Test User',
            role=role,
            membership_tier=tier,
            used_km_this_month=used_km,
            space_bookings_this_month=space_uses,
            is_active=True
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user

@pytest.fixture
def tour(db):
    tour = Tour(
        destination='Cataratas del Iguazú',
        price=Decimal('105000'),
        price_logistics=Decimal('80000'),
        price_ticket=Decimal('25000'),
        km=900,
        start_date=date.today() + timedelta(days=30),
        capacity=10
    )
    db.session.add(tour)
    db.session.commit()
    return tour

@pytest.fixture
def space(db):
    space = Space(
        name='Quincho Niño Jesús',
        price=Decimal('60000'),
        capacity=40
    )
    db.session.add(space)
    db.session.commit()
    return space

@pytest.fixture
def auth_headers(app):
    from flask_jwt_extended import create_access_token

    def _auth_headers(user):
        token = create_access_token(identity=user.id)
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers
