import pytest

from hotel_booking import create_app, db
from hotel_booking.models import Role

from tests.helpers import make_room, make_user


@pytest.fixture
def app():
    app = create_app('hotel_booking.config.TestingConfig')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer(app):
    return make_user(app, 'customer@example.com', name='Carla Customer')


@pytest.fixture
def other_customer(app):
    return make_user(app, 'other@example.com', name='Otto Other')


@pytest.fixture
def admin(app):
    return make_user(app, 'admin@example.com', role=Role.ADMIN, name='Ada Admin')


@pytest.fixture
def room_id(app):
    return make_room(app)
