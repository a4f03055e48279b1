"""Flashcard review session API endpoints."""
from flask import request
from flask_restful import Resource
from flask_jwt_extended import jwt_required, get_jwt_identity

from review.review_runner import start_review, get_review_state, reveal_card, grade_card, end_review


def error_response(error):
    return error.format_data(), int(error.http_status)


class ReviewSessionResource(Resource):
    @jwt_required()
    def get(self):
        user_id = int(get_jwt_identity())
        result, error = get_review_state(user_id)
        if error:
            return error_response(error)
        return result, 200

    @jwt_required()
    def post(self):
        # starts a new session, or restarts the current one from scratch
        user_id = int(get_jwt_identity())
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return {'error': 'Request body must be a JSON object'}, 400
        force_review = data.get('force_review', False)
        if not isinstance(force_review, bool):
            return {'error': "'force_review' must be true or false"}, 400

        result, error = start_review(user_id, force_review)
        if error:
            return error_response(error)
        return result, 201

    @jwt_required()
    def delete(self):
        user_id = int(get_jwt_identity())
        if not end_review(user_id):
            return {'error': 'No review session found'}, 404
        return {'message': 'Review session ended'}, 200


class ReviewRevealResource(Resource):
    @jwt_required()
    def post(self):
        user_id = int(get_jwt_identity())
        result, error = reveal_card(user_id)
        if error:
            return error_response(error)
        return result, 200


class ReviewGradeResource(Resource):
    @jwt_required()
    def post(self):
        user_id = int(get_jwt_identity())
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'status' not in data:
            return {'error': 'status is required'}, 400

        result, error = grade_card(user_id, data['status'])
        if error:
            return error_response(error)
        return result, 200
