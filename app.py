#!/usr/bin/env python3
"""
Run script for the asset registry API
"""

from assetsup import create_app
from assetsup.build import build_database
from assetsup.utils.logger import get_logger
import sys
import os
import argparse
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Run 'python generate_env.py' to create a .env file with a secret key
# and admin credentials.

app = create_app()
logger = get_logger("assetsup.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Asset registry API')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables (and seed data) and exit without starting the server')
    parser.add_argument('--no-seed-data', action='store_false', dest='seed_data',
                        help='Do not insert the default categories and departments')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting asset registry API...")

    with app.app_context():
        build_database(seed_data=args.seed_data)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # FLASK_HOST: Server host (default: 127.0.0.1 for security)
    host = os.environ.get('FLASK_HOST', '127.0.0.1')

    # FLASK_PORT: Server port (default: 5000)
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode})")
    try:
        app.run(debug=debug_mode, host=host, port=port, use_reloader=False)
    finally:
        app.extensions['stellar_worker'].shutdown(wait=False)
