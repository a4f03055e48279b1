# Main app code for Flask + SQLAlchemy backend implementation
import logging

# Import libraries
from flask import Flask
from flask_restful import Api
from flask_migrate import Migrate
from flask_cors import CORS
# Import from other files
from extensions import db, jwt, limiter
from resources import WordListResource, WordResource, UserListResource, HomeResource, TokenResource, TokenRefreshResource, TokenRevokeResource, MeResource
from review_resources import ReviewSessionResource, ReviewRevealResource, ReviewGradeResource
from dictionary_resources import DictionaryLookupResource, WordExistsResource
from progress_resources import ProgressStatsResource
from models import TokenBlocklist
from config import Config


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )


def register_extensions(app):
    db.init_app(app)
    Migrate(app, db)
    jwt.init_app(app)
    CORS(app, supports_credentials=True)
    limiter.init_app(app)

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return TokenBlocklist.is_blocklisted(jwt_payload['jti'])

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return {"error": "Rate limit exceeded. Try again later."}, 429


def register_resources(app):
    api = Api(app, prefix='/api')
    api.add_resource(HomeResource, '/')
    api.add_resource(UserListResource, '/users')
    api.add_resource(TokenResource, '/token')
    api.add_resource(TokenRefreshResource, '/token/refresh')
    api.add_resource(TokenRevokeResource, '/token/revoke')
    api.add_resource(MeResource, '/me')

    # Vocabulary
    api.add_resource(WordListResource, '/words')
    api.add_resource(WordResource, '/words/<int:id>')
    api.add_resource(DictionaryLookupResource, '/dictionary')
    api.add_resource(WordExistsResource, '/dictionary/exists')

    # Flashcard review session
    api.add_resource(ReviewSessionResource, '/review/session')
    api.add_resource(ReviewRevealResource, '/review/session/reveal')
    api.add_resource(ReviewGradeResource, '/review/session/grade')

    api.add_resource(ProgressStatsResource, '/progress/stats')


def create_app(config_class=None):
    app = Flask(__name__)
    if config_class is None:
        config_class = Config
    app.config.from_object(config_class)
    configure_logging(app)

    if not app.config.get('JWT_SECRET_KEY'):
        logging.warning("JWT_SECRET_KEY is not set. Logins will fail.")

    register_extensions(app)
    register_resources(app)
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000)
