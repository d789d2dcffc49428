#!/usr/bin/env python3
"""
WSGI entry point for the BalanceMe progress engine.
Serve ``wsgi:application`` with uWSGI or gunicorn.
"""

import os
import sys

# Add the project directory to Python path
sys.path.insert(0, os.path.dirname(__file__))

from app import create_app

# Create the Flask application instance
application = create_app()

if __name__ == "__main__":
    application.run()
