"""
Pytest configuration and fixtures for the API and bridge tests
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from stellar_sdk import Account, Keypair
from stellar_sdk.soroban_rpc import SendTransactionStatus
from stellar_sdk.strkey import StrKey

from assetsup import create_app
from assetsup import db as _db
from assetsup.data.core.user_info.user import User

TEST_PASSWORD = 'correct-horse-battery'
TX_HASH = 'ab' * 32

BASE_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'RATELIMIT_ENABLED': False,
    'STELLAR_ENABLED': None,
    'STELLAR_SECRET_KEY': None,
    'STELLAR_CONTRACT_ID': None,
}


def build_app(**overrides):
    app = create_app(dict(BASE_CONFIG, **overrides))
    with app.app_context():
        _db.create_all()
    return app


def teardown_app(app):
    app.extensions['stellar_worker'].shutdown()
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


def create_user(app, email='tester@example.com', first_name='Test', last_name='User', is_active=True):
    """Insert a user and return its id and a bearer token"""
    with app.app_context():
        user = User(email=email, first_name=first_name, last_name=last_name, is_active=is_active)
        user.set_password(TEST_PASSWORD)
        _db.session.add(user)
        _db.session.commit()
        return SimpleNamespace(id=user.id, email=user.email, token=user.generate_access_token())


def make_soroban_server(keypair, poll_statuses=(), send_status=SendTransactionStatus.PENDING,
                        simulation_error=None, error_result_xdr=None):
    """MagicMock standing in for SorobanServer"""
    server = MagicMock()
    server.load_account.return_value = Account(keypair.public_key, 1)
    server.simulate_transaction.return_value = SimpleNamespace(error=simulation_error)
    server.prepare_transaction.side_effect = lambda tx, simulation: tx
    server.send_transaction.return_value = SimpleNamespace(
        status=send_status, hash=TX_HASH, error_result_xdr=error_result_xdr)
    server.get_transaction.side_effect = [SimpleNamespace(status=status) for status in poll_statuses]
    return server


@pytest.fixture
def stellar_settings():
    """Valid bridge settings with a throwaway key"""
    return {
        'STELLAR_ENABLED': 'true',
        'STELLAR_SECRET_KEY': Keypair.random().secret,
        'STELLAR_CONTRACT_ID': StrKey.encode_contract(bytes(32)),
    }


@pytest.fixture
def app():
    """Application with an in-memory database and the bridge disabled"""
    app = build_app()
    yield app
    teardown_app(app)


@pytest.fixture
def stellar_app(stellar_settings):
    """Application with the bridge enabled (swap in a mock server per test)"""
    app = build_app(**stellar_settings)
    yield app
    teardown_app(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    return create_user(app)


@pytest.fixture
def auth_client(app, user):
    """Test client sending the user's bearer token on every request"""
    client = app.test_client()
    client.environ_base['HTTP_AUTHORIZATION'] = f'Bearer {user.token}'
    return client
