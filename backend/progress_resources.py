"""Progress stats API endpoints for the library page."""
from flask_restful import Resource
from flask_jwt_extended import jwt_required, get_jwt_identity
from models import Word
from review.context import MasteryStatus


class ProgressStatsResource(Resource):
    @jwt_required()
    def get(self):
        user_id = int(get_jwt_identity())

        counts = Word.count_by_status(user_id)
        total_words = sum(counts.values())

        new_count = counts[MasteryStatus.NEW]
        familiar_count = counts[MasteryStatus.FAMILIAR]
        mastered_count = counts[MasteryStatus.MASTERED]

        mastery_percentage = round(mastered_count / total_words * 100) if total_words else 0

        return {
            'total_words': total_words,
            'new': new_count,
            'familiar': familiar_count,
            'mastered': mastered_count,
            'mastery_percentage': mastery_percentage,
            # same eligibility as a normal review session
            'words_ready_for_review': new_count + familiar_count,
        }, 200
