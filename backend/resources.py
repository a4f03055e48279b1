# This file contains the resources for the Flask-Restful app
# Resources: word list, word, user registration, tokens (login/refresh/revoke), me, home

from flask import request, make_response
from flask_restful import Resource
from http import HTTPStatus
from models import Word, User, TokenBlocklist
from datetime import datetime
from utils import hash_password, check_password, paginate_query
from extensions import db, limiter
from review.context import validate_status
from review.errors import InvalidStatus
from flask_jwt_extended import (
    create_access_token, create_refresh_token,
    jwt_required, get_jwt_identity, get_jwt,
    set_refresh_cookies, unset_refresh_cookies
)
import re
import logging

logger = logging.getLogger(__name__)


def validate_password(password: str) -> tuple[bool, str]:
    """
    Validate password meets security requirements.
    Returns (is_valid, error_message).

    Requirements:
    - At least 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - Only alphanumeric characters (letters and numbers)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if not re.search(r'[A-Z]', password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r'[a-z]', password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r'\d', password):
        return False, "Password must contain at least one number"

    if not re.match(r'^[a-zA-Z0-9]+$', password):
        return False, "Password must contain only letters and numbers"

    return True, ""


# Word field length limits matching database column sizes
WORD_FIELD_LIMITS = {
    'word': 150,
    'definition_cn': 300,
    'sentence_1_en': 500,
    'sentence_1_cn': 500,
    'sentence_2_en': 500,
    'sentence_2_cn': 500,
}
TEXT_FIELDS = list(WORD_FIELD_LIMITS)
REQUIRED_WORD_FIELDS = ('word', 'definition_cn')


def validate_word_fields(data: dict) -> str | None:
    """Validate word field types and lengths. Returns error message if invalid, None if OK."""
    for field, max_len in WORD_FIELD_LIMITS.items():
        if field not in data or data[field] is None:
            continue
        if not isinstance(data[field], str):
            return f"'{field}' must be a string"
        if len(data[field]) > max_len:
            return f"'{field}' must be at most {max_len} characters"
    if 'status' in data:
        try:
            validate_status(data['status'])
        except InvalidStatus as e:
            return str(e)
    return None


def word_from_json(item: dict, user_id: int) -> Word:
    return Word(
        word=item['word'].strip(),
        definition_cn=item['definition_cn'].strip(),
        sentence_1_en=item.get('sentence_1_en') or '',
        sentence_1_cn=item.get('sentence_1_cn') or '',
        sentence_2_en=item.get('sentence_2_en') or '',
        sentence_2_cn=item.get('sentence_2_cn') or '',
        status=int(validate_status(item.get('status', 0))),
        created_ds=datetime.utcnow(),
        user_id=user_id,
    )


class WordListResource(Resource):

    @jwt_required()
    def get(self):
        vc_user = User.get_by_id(int(get_jwt_identity()))

        page = request.args.get('page', 1, type=int)
        per_page = request.args.get('per_page', 20, type=int)
        search = request.args.get('search', '', type=str).strip()
        sort_by = request.args.get('sort_by', 'created', type=str)
        status = request.args.get('status', None, type=int)

        base_query = Word.get_query_for_user(vc_user)

        if search:
            pattern = f"%{search}%"
            base_query = base_query.filter(
                db.or_(
                    Word.word.ilike(pattern),
                    Word.definition_cn.ilike(pattern),
                )
            )

        if status is not None:
            try:
                validate_status(status)
            except InvalidStatus as e:
                return {"error": str(e)}, 400
            base_query = base_query.filter(Word.status == status)

        if sort_by == 'word':
            base_query = base_query.order_by(Word.word)
        else:
            # newest first, like the library view
            base_query = base_query.order_by(Word.created_ds.desc(), Word.id.desc())

        items, pagination = paginate_query(base_query, page=page, per_page=per_page)
        data = [w.format_data(vc_user) for w in items]

        return {"data": data, "pagination": pagination}, 200

    @jwt_required()
    def post(self):
        # Accepts a single word object or an array of them
        data = request.get_json(silent=True)
        if not data:
            return {"error": "No data provided"}, 400

        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            return {"error": "Expected a word object or a JSON array of words"}, 400

        seen = set()
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                return {"error": f"Row {i+1} must be an object"}, 400
            for key in REQUIRED_WORD_FIELDS:
                if key not in item or not isinstance(item[key], str) or not item[key].strip():
                    return {"error": f"Row {i+1} is missing required field: {key}"}, 400
            err = validate_word_fields(item)
            if err:
                return {"error": f"Row {i+1}: {err}"}, 400
            key = item['word'].strip().lower()
            if key in seen:
                return {"error": f"Row {i+1}: '{item['word']}' appears more than once"}, 409
            seen.add(key)

        vc_user = User.get_by_id(int(get_jwt_identity()))

        for item in data:
            if Word.exists_for_user(vc_user.id, item['word']):
                return {"error": f"'{item['word'].strip()}' is already in your vocabulary"}, HTTPStatus.CONFLICT

        words_list = [word_from_json(item, vc_user.id) for item in data]

        try:
            Word.add_list(words_list)
        except Exception:
            logger.exception("Error creating words")
            return {"error": "An internal error occurred"}, 500

        # Format data after commit so ids are populated
        added_words_list_json = [word.format_data(vc_user) for word in words_list]
        return {"created_data": added_words_list_json}, HTTPStatus.CREATED

    @jwt_required()
    def delete(self):
        # this deletes all words for the logged in user
        vc_user = User.get_by_id(int(get_jwt_identity()))
        try:
            Word.delete_all(vc_user)
        except Exception:
            logger.exception("Error deleting words")
            return {"error": "An internal error occurred"}, 500

        return {'message': "All your words successfully deleted"}, HTTPStatus.OK


class WordResource(Resource):

    @staticmethod
    def _find_owned(id: int, vc_user):
        """Returns (word, error_response)."""
        found_word = Word.get_by_id(id)
        if not found_word:
            return None, ({'error': 'word not found'}, HTTPStatus.NOT_FOUND)
        if not found_word.is_owner(vc_user):
            return None, ({'error': 'Forbidden'}, HTTPStatus.FORBIDDEN)
        return found_word, None

    @jwt_required()
    def get(self, id: int):
        vc_user = User.get_by_id(int(get_jwt_identity()))
        found_word, error = self._find_owned(id, vc_user)
        if error:
            return error
        return found_word.format_data(vc_user), 200

    @jwt_required()
    def put(self, id: int):
        vc_user = User.get_by_id(int(get_jwt_identity()))
        data = request.get_json(silent=True)

        if not data or not isinstance(data, dict):
            return {"error": "No data provided"}, 400

        err = validate_word_fields(data)
        if err:
            return {"error": err}, 400

        allowable_fields = TEXT_FIELDS + ["status"]
        fields_to_update = [k for k in data.keys() if k in allowable_fields]
        if len(fields_to_update) == 0:
            return {"error": "Invalid update parameters"}, 400

        for key in REQUIRED_WORD_FIELDS:
            if key in data and (data[key] is None or not data[key].strip()):
                return {"error": f"'{key}' cannot be empty"}, 400

        found_word, error = self._find_owned(id, vc_user)
        if error:
            return error

        if 'word' in data and data['word'].strip().lower() != found_word.word.lower():
            if Word.exists_for_user(vc_user.id, data['word']):
                return {"error": f"'{data['word'].strip()}' is already in your vocabulary"}, HTTPStatus.CONFLICT

        for field in fields_to_update:
            if field == "status":
                found_word.update_status(data[field])
                continue
            value = data[field] or ''
            setattr(found_word, field, value.strip() if field in REQUIRED_WORD_FIELDS else value)

        try:
            found_word.update()
        except Exception:
            logger.exception("Error updating word")
            return {"error": "An internal error occurred"}, 500

        return found_word.format_data(vc_user), HTTPStatus.OK

    @jwt_required()
    def delete(self, id: int):
        vc_user = User.get_by_id(int(get_jwt_identity()))
        found_word, error = self._find_owned(id, vc_user)
        if error:
            return error

        try:
            found_word.delete()
        except Exception:
            logger.exception("Error deleting word")
            return {"error": "An internal error occurred"}, 500

        return {'message': f"word {found_word.word} successfully deleted"}, HTTPStatus.OK


class UserListResource(Resource):

    @limiter.limit("5 per minute")
    def post(self):
        # Users can only be created one at a time
        data = request.get_json(silent=True)

        if not data or not isinstance(data, dict):
            return {"error": "No data provided"}, 400

        # mandatory fields - use key indexing to throw error if key doesn't exist
        try:
            username = data['username']
            email = data['email']
            password = data['password']
        except KeyError:
            return {"error": "Username, email, and password are required"}, 400

        if not all(isinstance(value, str) for value in (username, email, password)):
            return {"error": "Username, email, and password must be strings"}, 400

        if not username or len(username) < 3 or len(username) > 80:
            return {"error": "Username must be 3-80 characters"}, 400
        if not email or len(email) > 200:
            return {"error": "Email must be at most 200 characters"}, 400
        if not password or len(password) < 8 or len(password) > 200:
            return {"error": "Password must be 8-200 characters"}, 400

        is_password_valid, password_error = validate_password(password)
        if not is_password_valid:
            return {"error": password_error}, 400

        if not User.is_email_valid(email):
            return {"error": "Email invalid or already registered"}, 400
        if not User.is_username_valid(username):
            return {"error": "Username invalid or already registered"}, 400

        user_to_add = User(username=username, email=email, password=hash_password(password), created_ds=datetime.now())

        try:
            user_to_add.add()
        except Exception:
            logger.exception("Error creating user")
            return {"error": "An internal error occurred"}, 500

        return {"created_data": user_to_add.format_data()}, HTTPStatus.CREATED


class HomeResource(Resource):
    def get(self):
        return "You have successfully called the Vocab Master API. Congrats!"


class TokenResource(Resource):
    # This is the login endpoint

    @limiter.limit("5 per minute")
    def post(self):
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return {'message': 'Username and password are required'}, HTTPStatus.BAD_REQUEST
        username = data.get('username')
        password = data.get('password')
        if not isinstance(username, str) or not isinstance(password, str):
            return {'message': 'Username or password is incorrect.'}, HTTPStatus.UNAUTHORIZED

        user = User.get_by_username(username)

        if not user or not password or not check_password(password, user.password):
            return {'message': 'Username or password is incorrect.'}, HTTPStatus.UNAUTHORIZED

        identity = str(user.id)
        access_token = create_access_token(identity=identity)
        refresh_token = create_refresh_token(identity=identity)

        response = make_response(
            {'access_token': access_token},
            HTTPStatus.OK
        )
        set_refresh_cookies(response, refresh_token)
        return response


class TokenRefreshResource(Resource):

    @limiter.limit("10 per minute")
    @jwt_required(refresh=True)
    def post(self):
        """Issue a new access token + rotated refresh token."""
        identity = get_jwt_identity()

        # Blocklist the old refresh token
        TokenBlocklist(jti=get_jwt()['jti'], created_ds=datetime.now()).add()

        response = make_response(
            {'access_token': create_access_token(identity=identity)},
            HTTPStatus.OK
        )
        set_refresh_cookies(response, create_refresh_token(identity=identity))
        return response


class TokenRevokeResource(Resource):
    @jwt_required(refresh=True)
    def post(self):
        """Revoke the refresh token (logout)."""
        TokenBlocklist(jti=get_jwt()['jti'], created_ds=datetime.now()).add()

        response = make_response(
            {'message': 'Token revoked'},
            HTTPStatus.OK
        )
        unset_refresh_cookies(response)
        return response


class MeResource(Resource):
    # return data on self for logged in users
    @jwt_required()
    def get(self):
        found_user = User.get_by_id(int(get_jwt_identity()))
        if not found_user:
            return {'error': 'user not found'}, HTTPStatus.NOT_FOUND

        return found_user.format_data(found_user), 200
