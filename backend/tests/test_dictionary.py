"""Tests for the dictionary lookup service and its endpoints."""
import json
from unittest.mock import Mock, patch

import pytest
import requests

from dictionary import (
    DictionaryParseError, DictionaryUnavailable, EmptyQuery, WordNotFound,
    format_word, lookup_word, parse_entry,
)

ENTRY_HTML = """
<html><body>
  <div class="di-title">abandon</div>
  <div class="def-block">
    <div class="def">to leave behind</div>
    <span class="trans">拋棄，離棄</span>
    <div class="examp"><span class="eg">They abandoned the car.</span><span class="trans">他們棄車而去。</span></div>
    <div class="examp"><span class="eg">No translation here.</span></div>
    <div class="examp"><span class="eg">We had to abandon the match.</span><span class="trans">我們只好中止比賽。</span></div>
    <div class="examp"><span class="eg">A third example.</span><span class="trans">第三個例句。</span></div>
  </div>
  <div class="def-block">
    <span class="trans">放縱</span>
  </div>
</body></html>
"""

NOT_FOUND_HTML = "<html><body><div class='search-results'>Did you mean...</div></body></html>"

TITLE_ONLY_HTML = "<html><body><div class='di-title'>abandon</div></body></html>"


def _response(text, status_code=200):
    response = Mock()
    response.text = text
    response.status_code = status_code
    response.raise_for_status = Mock()
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


class TestParseEntry:

    def test_first_definition_and_two_translated_examples(self):
        result = parse_entry('abandon', ENTRY_HTML)

        assert result['word'] == 'abandon'
        assert result['definition'] == '拋棄，離棄'
        assert result['examples'] == [
            {'en': 'They abandoned the car.', 'cn': '他們棄車而去。'},
            {'en': 'We had to abandon the match.', 'cn': '我們只好中止比賽。'},
        ]

    def test_no_title_and_no_definition_is_not_found(self):
        with pytest.raises(WordNotFound):
            parse_entry('abandn', NOT_FOUND_HTML)

    def test_title_without_definition_is_parse_error(self):
        with pytest.raises(DictionaryParseError):
            parse_entry('abandon', TITLE_ONLY_HTML)


@pytest.mark.parametrize('raw, expected', [
    ('Abandon', 'abandon'),
    ('  look   up ', 'look-up'),
    ('give\tup', 'give-up'),
])
def test_format_word(raw, expected):
    assert format_word(raw) == expected


class TestLookupWord:

    def test_builds_url_and_sends_user_agent(self, app):
        with app.app_context(), patch('dictionary.requests.get', return_value=_response(ENTRY_HTML)) as mock_get:
            result = lookup_word(' Look Up ')

        url = mock_get.call_args.args[0]
        assert url == 'https://dictionary.test/lookup/look-up'
        assert 'Mozilla' in mock_get.call_args.kwargs['headers']['User-Agent']
        assert mock_get.call_args.kwargs['timeout'] == app.config['DICTIONARY_TIMEOUT']
        assert result['word'] == 'Look Up'

    @pytest.mark.parametrize('word', ['', '   ', None])
    def test_empty_query(self, app, word):
        with app.app_context(), pytest.raises(EmptyQuery):
            lookup_word(word)

    def test_network_error_is_unavailable(self, app):
        with app.app_context(), patch('dictionary.requests.get', side_effect=requests.ConnectionError('boom')):
            with pytest.raises(DictionaryUnavailable):
                lookup_word('abandon')

    def test_http_404_is_not_found(self, app):
        with app.app_context(), patch('dictionary.requests.get', return_value=_response('', 404)):
            with pytest.raises(WordNotFound):
                lookup_word('abandon')

    def test_http_500_is_unavailable(self, app):
        with app.app_context(), patch('dictionary.requests.get', return_value=_response('', 500)):
            with pytest.raises(DictionaryUnavailable):
                lookup_word('abandon')


class TestDictionaryEndpoints:

    def test_lookup_requires_auth(self, client):
        assert client.get('/api/dictionary?word=abandon').status_code == 401

    def test_lookup(self, client, auth_headers):
        with patch('dictionary.requests.get', return_value=_response(ENTRY_HTML)):
            resp = client.get('/api/dictionary', headers=auth_headers, query_string={'word': 'abandon'})

        assert resp.status_code == 200
        data = json.loads(resp.data)
        assert data['definition'] == '拋棄，離棄'
        assert len(data['examples']) == 2
        assert data['in_library'] is False

    def test_lookup_flags_words_already_saved(self, client, auth_headers):
        client.post('/api/words', headers=auth_headers, json={'word': 'Abandon', 'definition_cn': '拋棄'})
        with patch('dictionary.requests.get', return_value=_response(ENTRY_HTML)):
            resp = client.get('/api/dictionary', headers=auth_headers, query_string={'word': 'abandon'})

        assert json.loads(resp.data)['in_library'] is True

    def test_lookup_without_word(self, client, auth_headers):
        resp = client.get('/api/dictionary', headers=auth_headers)
        assert resp.status_code == 400

    def test_lookup_not_found(self, client, auth_headers):
        with patch('dictionary.requests.get', return_value=_response(NOT_FOUND_HTML)):
            resp = client.get('/api/dictionary', headers=auth_headers, query_string={'word': 'abandn'})
        assert resp.status_code == 404

    def test_lookup_upstream_down(self, client, auth_headers):
        with patch('dictionary.requests.get', side_effect=requests.Timeout('slow')):
            resp = client.get('/api/dictionary', headers=auth_headers, query_string={'word': 'abandon'})
        assert resp.status_code == 502

    def test_exists(self, client, auth_headers):
        client.post('/api/words', headers=auth_headers, json={'word': 'apple', 'definition_cn': '蘋果'})

        resp = client.get('/api/dictionary/exists', headers=auth_headers, query_string={'word': 'APPLE'})
        assert json.loads(resp.data)['exists'] is True

        resp = client.get('/api/dictionary/exists', headers=auth_headers, query_string={'word': 'pear'})
        assert json.loads(resp.data)['exists'] is False
