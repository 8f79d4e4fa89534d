"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, enable_sqlite_foreign_keys


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created. StaticPool → one shared connection."""
    engine = enable_sqlite_foreign_keys(create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    ))
    import app.models.lead
    import app.models.generated_script
    import app.models.user_profile
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Session for direct assertions against the test database."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(session_factory):
    """
    Route every get_session() call to the in-memory engine.

    app.services.db does `from app.database import get_session` at import
    time, so both bindings are patched. Each call gets a fresh session so the
    close() in production code never affects the test's own session.
    """
    with patch('app.database.get_session', side_effect=lambda: session_factory()), \
         patch('app.services.db.get_session', side_effect=lambda: session_factory()):
        yield session_factory


@pytest.fixture(autouse=True)
def mock_feed_redis():
    """Redis client used by the results feed (publish + pubsub)."""
    mock = MagicMock()
    mock.publish.return_value = 1
    with patch('app.services.results_feed.r', mock):
        yield mock


@pytest.fixture
def app():
    """Flask test app with fresh in-memory rate limiters."""
    from app import create_app
    from app.services.rate_limiter import init_limiters, MemoryRateLimitStore
    with patch('app.config.ADMIN_PASSWORD', None):
        app = create_app()
    app.config['TESTING'] = True
    init_limiters(MemoryRateLimitStore())
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def form_payload():
    """Intake JSON as the browser form posts it."""
    return {
        'businessType': 'Plumber',
        'businessDescription': 'drain cleaning',
        'city': 'Austin',
        'firstName': 'Sam',
        'companyName': "Sam's Plumbing",
        'email': 'sam@x.com',
    }


@pytest.fixture
def sample_form():
    """Sanitized form dict, as produced by validate_lead_form()."""
    return {
        'first_name': 'Sam',
        'last_name': '',
        'company_name': 'Sam&#39;s Plumbing',
        'website_url': None,
        'email': 'sam@x.com',
        'business_type': 'Plumber',
        'business_description': 'drain cleaning',
        'marketing_location': '',
        'city': 'Austin',
        'country': '',
    }


@pytest.fixture
def make_lead(sample_form):
    """Factory fixture — inserts a lead through the persistence helper."""
    from app.services.db import create_lead

    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        form = {**sample_form, **overrides}
        short_hash = overrides.pop('short_hash', None) or f'{counter["n"]:032x}'
        form.pop('short_hash', None)
        user_id = form.pop('user_id', None)
        lead = create_lead(form, short_hash, user_id=user_id)
        assert lead is not None
        return lead
    return _make
