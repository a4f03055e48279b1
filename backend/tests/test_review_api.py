"""Integration tests for the flashcard review session API endpoints."""
import json
from unittest.mock import patch

import pytest

from models import User, Word
from review.errors import VocabularyStoreError
from review.sql_store import SqlVocabularyStore


def _add_words(username, statuses):
    user = User.query.filter_by(username=username).first()
    words = [
        Word(user_id=user.id, word=f'word{i}', definition_cn=f'定義{i}',
             sentence_1_en=f'This is word{i}.', sentence_1_cn=f'這是 word{i}。', status=status)
        for i, status in enumerate(statuses)
    ]
    Word.add_list(words)
    return words


def _start(client, headers, force_review=None):
    body = {} if force_review is None else {'force_review': force_review}
    return client.post('/api/review/session', headers=headers, json=body)


class TestStartReviewSession:

    def test_requires_auth(self, client):
        resp = client.post('/api/review/session', json={})
        assert resp.status_code == 401

    def test_empty_library(self, client, auth_headers):
        resp = _start(client, auth_headers)

        assert resp.status_code == 201
        data = json.loads(resp.data)
        assert data['phase'] == 'empty'
        assert data['current_card'] is None

    def test_all_mastered_is_distinct_from_empty(self, client, auth_headers):
        _add_words('testuser', [2, 2])
        resp = _start(client, auth_headers)

        data = json.loads(resp.data)
        assert data['phase'] == 'all_mastered'
        assert data['total'] == 0

    def test_force_review_includes_mastered_words(self, client, auth_headers):
        _add_words('testuser', [2, 2])
        resp = _start(client, auth_headers, force_review=True)

        data = json.loads(resp.data)
        assert data['phase'] == 'in_progress'
        assert data['total'] == 2
        assert data['force_review'] is True

    def test_normal_session_only_has_unmastered_words(self, client, auth_headers):
        _add_words('testuser', [0, 2, 1])
        resp = _start(client, auth_headers)

        data = json.loads(resp.data)
        assert data['phase'] == 'in_progress'
        assert data['total'] == 2
        assert data['position'] == 0
        assert data['card_face'] == 'front'
        assert data['current_card']['word'] in ('word0', 'word2')

    def test_front_of_card_hides_the_answer(self, client, auth_headers):
        _add_words('testuser', [0])
        data = json.loads(_start(client, auth_headers).data)

        card = data['current_card']
        assert card['sentence_1_en'] == 'This is word0.'
        assert 'definition_cn' not in card
        assert 'sentence_1_cn' not in card

    def test_force_review_must_be_boolean(self, client, auth_headers):
        resp = _start(client, auth_headers, force_review='yes')
        assert resp.status_code == 400

    def test_body_must_be_an_object(self, client, auth_headers):
        resp = client.post('/api/review/session', headers=auth_headers, json=[True])
        assert resp.status_code == 400

    def test_store_failure_returns_503(self, client, auth_headers):
        _add_words('testuser', [0])
        with patch.object(SqlVocabularyStore, 'list_all', side_effect=VocabularyStoreError('down')):
            resp = _start(client, auth_headers)

        assert resp.status_code == 503
        assert json.loads(resp.data)['retryable'] is True

        # the session is stuck loading, nothing can be graded
        resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': 1})
        assert resp.status_code == 409


class TestReviewSessionFlow:

    def test_get_without_session_returns_404(self, client, auth_headers):
        resp = client.get('/api/review/session', headers=auth_headers)
        assert resp.status_code == 404

    def test_reveal_shows_the_back(self, client, auth_headers):
        _add_words('testuser', [0])
        _start(client, auth_headers)

        resp = client.post('/api/review/session/reveal', headers=auth_headers)
        assert resp.status_code == 200
        data = json.loads(resp.data)
        assert data['card_face'] == 'back'
        assert data['current_card']['definition_cn'] == '定義0'
        assert data['current_card']['status_label'] == 'new'

        # revealing twice is harmless
        resp = client.post('/api/review/session/reveal', headers=auth_headers)
        assert json.loads(resp.data)['card_face'] == 'back'

    def test_full_session_updates_status_and_finishes(self, client, auth_headers):
        words = _add_words('testuser', [0, 1])
        _start(client, auth_headers)

        graded = []
        for expected_position in (0, 1):
            state = json.loads(client.get('/api/review/session', headers=auth_headers).data)
            assert state['position'] == expected_position
            graded.append(state['current_card']['id'])
            client.post('/api/review/session/reveal', headers=auth_headers)
            resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': 2})
            assert resp.status_code == 200

        data = json.loads(resp.data)
        assert data['phase'] == 'finished'
        assert sorted(graded) == sorted(w.id for w in words)
        assert all(Word.get_by_id(w.id).status == 2 for w in words)

        # finished sessions accept nothing but a restart
        resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': 1})
        assert resp.status_code == 409
        resp = client.post('/api/review/session/reveal', headers=auth_headers)
        assert resp.status_code == 409

        # everything is mastered now
        data = json.loads(_start(client, auth_headers).data)
        assert data['phase'] == 'all_mastered'

    def test_grade_requires_status(self, client, auth_headers):
        _add_words('testuser', [0])
        _start(client, auth_headers)

        resp = client.post('/api/review/session/grade', headers=auth_headers, json={})
        assert resp.status_code == 400

    @pytest.mark.parametrize('body', ['status', ['status'], 2])
    def test_grade_body_must_be_an_object(self, client, auth_headers, body):
        _add_words('testuser', [0])
        _start(client, auth_headers)

        resp = client.post('/api/review/session/grade', headers=auth_headers, json=body)
        assert resp.status_code == 400

        state = json.loads(client.get('/api/review/session', headers=auth_headers).data)
        assert state['position'] == 0

    @pytest.mark.parametrize('bad_status', [3, -1, '2', None])
    def test_grade_rejects_invalid_status(self, client, auth_headers, bad_status):
        _add_words('testuser', [0, 0])
        _start(client, auth_headers)

        resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': bad_status})
        assert resp.status_code == 400

        state = json.loads(client.get('/api/review/session', headers=auth_headers).data)
        assert state['position'] == 0

    def test_failed_write_keeps_position(self, client, auth_headers):
        _add_words('testuser', [0, 0])
        _start(client, auth_headers)
        client.post('/api/review/session/reveal', headers=auth_headers)

        with patch.object(SqlVocabularyStore, 'update_status', side_effect=VocabularyStoreError('down')):
            resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': 1})

        assert resp.status_code == 503
        assert json.loads(resp.data)['retryable'] is True

        state = json.loads(client.get('/api/review/session', headers=auth_headers).data)
        assert state['position'] == 0
        assert state['card_face'] == 'back'

        # retry goes through
        resp = client.post('/api/review/session/grade', headers=auth_headers, json={'status': 1})
        assert resp.status_code == 200
        assert json.loads(resp.data)['position'] == 1

    def test_restart_starts_over(self, client, auth_headers):
        _add_words('testuser', [0, 0, 0])
        _start(client, auth_headers)
        client.post('/api/review/session/grade', headers=auth_headers, json={'status': 1})

        data = json.loads(_start(client, auth_headers).data)
        assert data['position'] == 0
        assert data['total'] == 3

    def test_delete_ends_session(self, client, auth_headers):
        _add_words('testuser', [0])
        _start(client, auth_headers)

        resp = client.delete('/api/review/session', headers=auth_headers)
        assert resp.status_code == 200
        resp = client.get('/api/review/session', headers=auth_headers)
        assert resp.status_code == 404
        resp = client.delete('/api/review/session', headers=auth_headers)
        assert resp.status_code == 404


class TestProgressStats:

    def test_empty_library(self, client, auth_headers):
        resp = client.get('/api/progress/stats', headers=auth_headers)
        data = json.loads(resp.data)
        assert data['total_words'] == 0
        assert data['mastery_percentage'] == 0

    def test_counts_per_status(self, client, auth_headers):
        _add_words('testuser', [0, 0, 1, 2])
        data = json.loads(client.get('/api/progress/stats', headers=auth_headers).data)

        assert data['total_words'] == 4
        assert data['new'] == 2
        assert data['familiar'] == 1
        assert data['mastered'] == 1
        assert data['mastery_percentage'] == 25
        assert data['words_ready_for_review'] == 3
