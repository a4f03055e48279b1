"""Dictionary lookup API endpoints."""
import logging

from flask import request
from flask_restful import Resource
from flask_jwt_extended import jwt_required, get_jwt_identity

from dictionary import lookup_word, DictionaryError
from models import Word

logger = logging.getLogger(__name__)


class DictionaryLookupResource(Resource):
    @jwt_required()
    def get(self):
        word = request.args.get('word', '', type=str)
        try:
            result = lookup_word(word)
        except DictionaryError as e:
            logger.info(f"Lookup of '{word}' failed: {e}")
            return {'error': str(e)}, int(e.http_status)

        user_id = int(get_jwt_identity())
        result['in_library'] = Word.exists_for_user(user_id, result['word'])
        return result, 200


class WordExistsResource(Resource):
    @jwt_required()
    def get(self):
        word = request.args.get('word', '', type=str).strip()
        if not word:
            return {'error': 'Please enter a word'}, 400

        user_id = int(get_jwt_identity())
        return {'word': word, 'exists': Word.exists_for_user(user_id, word)}, 200
