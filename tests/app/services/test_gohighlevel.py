"""Tests for app.services.gohighlevel — contact creation + workflow enrollment."""
import pytest
from unittest.mock import patch, MagicMock

from app.services import gohighlevel
from app.services.gohighlevel import (
    CRMError,
    build_contact_payload,
    create_contact,
    add_contact_to_workflow,
    is_configured,
)


LEAD = {
    'id': 'lead-1',
    'first_name': 'Sam',
    'last_name': '',
    'email': 'sam@x.com',
    'company_name': 'Sam&#39;s Plumbing',
    'city': 'Austin',
    'country': '',
    'website_url': None,
}
FORM = {'business_type': 'Plumber', 'business_description': 'drain cleaning'}


def _response(status_code=200, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = body or {}
    resp.text = str(body)
    return resp


@pytest.fixture(autouse=True)
def _credentials():
    with patch.object(gohighlevel, 'GOHIGHLEVEL_API_KEY', 'test-key'), \
         patch.object(gohighlevel, 'GOHIGHLEVEL_LOCATION_ID', 'loc-1'):
        yield


class TestIsConfigured:

    def test_configured(self):
        assert is_configured() is True

    def test_missing_key(self):
        with patch.object(gohighlevel, 'GOHIGHLEVEL_API_KEY', None):
            assert is_configured() is False

    def test_missing_location(self):
        with patch.object(gohighlevel, 'GOHIGHLEVEL_LOCATION_ID', ''):
            assert is_configured() is False


class TestBuildContactPayload:

    def test_fields(self):
        payload = build_contact_payload(LEAD, FORM)
        assert payload['firstName'] == 'Sam'
        assert payload['email'] == 'sam@x.com'
        assert payload['companyName'] == 'Sam&#39;s Plumbing'
        assert payload['locationId'] == 'loc-1'
        assert payload['source'] == 'Transformo AI Content Strategist'
        assert {'key': 'business_type', 'field_value': 'Plumber'} in payload['customFields']

    def test_blank_optionals_become_none(self):
        payload = build_contact_payload(LEAD, FORM)
        assert payload['country'] is None
        assert payload['website'] is None


class TestCreateContact:

    @patch('app.services.gohighlevel.requests.post')
    def test_returns_contact_id(self, mock_post):
        mock_post.return_value = _response(201, {'contact': {'id': 'ghl-123'}})

        assert create_contact(LEAD, FORM) == 'ghl-123'

        url = mock_post.call_args[0][0]
        kwargs = mock_post.call_args[1]
        assert url == 'https://services.leadconnectorhq.com/contacts/'
        assert kwargs['headers']['Authorization'] == 'Bearer test-key'
        assert kwargs['headers']['Version'] == '2021-07-28'
        assert kwargs['timeout'] == 15

    @patch('app.services.gohighlevel.requests.post')
    def test_none_values_not_sent(self, mock_post):
        mock_post.return_value = _response(201, {'contact': {'id': 'ghl-123'}})
        create_contact(LEAD, FORM)
        body = mock_post.call_args[1]['json']
        assert 'website' not in body
        assert 'country' not in body

    @patch('app.services.gohighlevel.requests.post')
    def test_error_status_raises(self, mock_post):
        mock_post.return_value = _response(422, {'message': 'bad email'})
        with pytest.raises(CRMError) as exc:
            create_contact(LEAD, FORM)
        assert exc.value.status_code == 422

    @patch('app.services.gohighlevel.requests.post')
    def test_missing_contact_id_raises(self, mock_post):
        mock_post.return_value = _response(200, {'contact': {}})
        with pytest.raises(CRMError):
            create_contact(LEAD, FORM)


class TestAddContactToWorkflow:

    @patch('app.services.gohighlevel.requests.post')
    def test_success(self, mock_post):
        mock_post.return_value = _response(200, {})
        assert add_contact_to_workflow('ghl-123', 'wf-9') is True
        assert mock_post.call_args[0][0] == \
            'https://services.leadconnectorhq.com/contacts/ghl-123/workflow/wf-9'

    @patch('app.services.gohighlevel.requests.post')
    def test_failure_returns_false(self, mock_post):
        mock_post.return_value = _response(400, {})
        assert add_contact_to_workflow('ghl-123', 'wf-9') is False
