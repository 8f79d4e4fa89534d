"""Tests for /admin/api/* and the admin password gate."""
import pytest
from unittest.mock import patch

from app.models.user_profile import UserProfile
from app.services.db import insert_script


def _add_user(db_session, user_id, is_admin=False):
    db_session.add(UserProfile(id=user_id, email=f'{user_id}@x.com', is_admin=is_admin))
    db_session.commit()


@pytest.fixture
def gated_client():
    """Client for an app created with ADMIN_PASSWORD set."""
    from app import create_app
    from app.services.rate_limiter import init_limiters, MemoryRateLimitStore
    with patch('app.config.ADMIN_PASSWORD', 's3cret'):
        gated = create_app()
    gated.config['TESTING'] = True
    init_limiters(MemoryRateLimitStore())
    with gated.test_client() as c:
        yield c


# ── Password gate ────────────────────────────────────────────────────────────

class TestAdminGate:

    def test_api_requires_login(self, gated_client):
        resp = gated_client.get('/admin/api/stats')
        assert resp.status_code == 401
        assert resp.get_json() == {'error': 'Authentication required'}

    def test_public_routes_not_gated(self, gated_client):
        assert gated_client.get('/health').status_code == 200
        assert gated_client.get('/api/business-types').status_code == 200

    def test_login_page(self, gated_client):
        resp = gated_client.get('/login')
        assert resp.status_code == 200
        assert b'password' in resp.data

    def test_wrong_password(self, gated_client):
        resp = gated_client.post('/login', data={'password': 'nope'})
        assert resp.status_code == 401
        assert b'Wrong password' in resp.data

    def test_login_then_access(self, gated_client):
        resp = gated_client.post('/login', data={'password': 's3cret'})
        assert resp.status_code == 302

        assert gated_client.get('/admin/api/stats').status_code == 200

    def test_logout_clears_session(self, gated_client):
        gated_client.post('/login', data={'password': 's3cret'})
        gated_client.get('/logout')
        assert gated_client.get('/admin/api/stats').status_code == 401


# ── Stats + leads ────────────────────────────────────────────────────────────

class TestAdminLeads:

    def test_stats(self, client, make_lead):
        make_lead()
        data = client.get('/admin/api/stats').get_json()
        assert data['total_leads'] == 1
        assert data['generation_status']['pending'] == 1

    def test_list_leads(self, client, make_lead):
        lead = make_lead()
        insert_script(lead['id'], 'A', 'a', 1)

        data = client.get('/admin/api/leads').get_json()

        assert data['limit'] == 100
        assert data['offset'] == 0
        assert data['leads'][0]['id'] == lead['id']
        assert data['leads'][0]['script_count'] == 1
        assert data['leads'][0]['email'] == 'sam@x.com'

    def test_list_leads_bad_paging_falls_back(self, client):
        data = client.get('/admin/api/leads?limit=abc&offset=-5').get_json()
        assert data['limit'] == 100
        assert data['offset'] == 0

    def test_list_leads_limit_capped(self, client):
        assert client.get('/admin/api/leads?limit=9999').get_json()['limit'] == 500

    def test_lead_detail(self, client, make_lead):
        lead = make_lead()
        insert_script(lead['id'], 'A', 'a', 1)

        data = client.get(f"/admin/api/leads/{lead['id']}").get_json()

        assert data['lead']['short_hash'] == lead['short_hash']
        assert [s['title'] for s in data['scripts']] == ['A']

    def test_lead_detail_404(self, client):
        assert client.get('/admin/api/leads/missing').status_code == 404

    def test_edit_status(self, client, make_lead):
        lead = make_lead()

        resp = client.patch(f"/admin/api/leads/{lead['id']}", json={'status': 'qualified'})

        assert resp.status_code == 200
        assert resp.get_json()['lead']['status'] == 'qualified'

    def test_edit_status_invalid(self, client, make_lead):
        lead = make_lead()
        resp = client.patch(f"/admin/api/leads/{lead['id']}", json={'status': 'archived'})
        assert resp.status_code == 400

    def test_edit_status_missing_lead(self, client):
        resp = client.patch('/admin/api/leads/missing', json={'status': 'closed'})
        assert resp.status_code == 404

    def test_edit_status_by_short_hash(self, client, make_lead):
        lead = make_lead()
        resp = client.patch(f"/admin/api/leads/{lead['short_hash']}", json={'status': 'contacted'})
        assert resp.status_code == 200
        assert resp.get_json()['lead']['id'] == lead['id']

    def test_edit_status_persistence_error_500(self, client, make_lead):
        lead = make_lead()

        with patch('app.routes.admin.update_lead_status', return_value=None):
            resp = client.patch(f"/admin/api/leads/{lead['id']}", json={'status': 'closed'})

        assert resp.status_code == 500
        assert resp.get_json() == {'error': 'Failed to update lead status'}


# ── Users ────────────────────────────────────────────────────────────────────

class TestAdminUsers:

    def test_list_users(self, client, db_session):
        _add_user(db_session, 'u1', is_admin=True)
        _add_user(db_session, 'u2')

        data = client.get('/admin/api/users').get_json()

        assert data['total'] == 2
        assert data['admins'] == 1
        assert data['pending'] == 1

    def test_user_detail(self, client, db_session, make_lead):
        _add_user(db_session, 'u1')
        lead = make_lead(user_id='u1')
        make_lead(user_id='someone-else')
        insert_script(lead['id'], 'A', 'a', 1)

        data = client.get('/admin/api/users/u1').get_json()

        assert data['user']['id'] == 'u1'
        assert [l['id'] for l in data['leads']] == [lead['id']]
        assert [s['lead_id'] for s in data['scripts']] == [lead['id']]

    def test_user_detail_404(self, client):
        assert client.get('/admin/api/users/missing').status_code == 404

    def test_toggle_admin(self, client, db_session):
        _add_user(db_session, 'u1')

        resp = client.post('/admin/api/users/u1/toggle-admin')

        assert resp.status_code == 200
        assert resp.get_json()['ok'] is True
        assert resp.get_json()['user']['is_admin'] is True

    def test_toggle_admin_missing(self, client):
        resp = client.post('/admin/api/users/missing/toggle-admin')
        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'User not found'}

    def test_toggle_admin_persistence_error_500(self, client, db_session):
        _add_user(db_session, 'u1')

        with patch('app.routes.admin.toggle_admin', return_value=None):
            resp = client.post('/admin/api/users/u1/toggle-admin')

        assert resp.status_code == 500
        assert resp.get_json() == {'error': 'Failed to update admin status'}
