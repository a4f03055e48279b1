"""
Run script for the Vocab Master backend.

Usage (from the backend directory):
    python run.py
"""

import sys
import os

# Backend modules import each other as top-level modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app
from extensions import db

if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
    print("Starting Vocab Master backend...")
    print("API available at: http://localhost:5000/api")
    print("\nPress Ctrl+C to stop the server.")
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=5000)
