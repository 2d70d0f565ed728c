#!/usr/bin/env python3
"""
Flask Application Runner
========================

Entry point for running the quiz certificate service.

Usage:
    python run_server.py           # Run with default settings
    python run_server.py --debug   # Run in debug mode
    python run_server.py --port 8000  # Run on custom port

Environment Variables:
    LINKEDIN_CLIENT_ID, LINKEDIN_CLIENT_SECRET, LINKEDIN_REDIRECT_URI - required
    PORT         - Server port (default: 3003)
    FLASK_DEBUG  - Enable debug mode (default: False)
    LOG_LEVEL    - Logging level (default: INFO)
"""

import os
import sys
import argparse
import logging

from dotenv import load_dotenv


def setup_logging():
    level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s %(message)s',
    )


def main():
    """Main entry point for the Flask application"""
    parser = argparse.ArgumentParser(description='Run the quiz certificate service')
    parser.add_argument('--port', type=int, default=None, help='Port to run on')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--host', default='0.0.0.0', help='Host to bind to')
    args = parser.parse_args()

    load_dotenv()
    setup_logging()

    from config import ConfigError
    from app import create_app

    try:
        app = create_app()
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        print("💡 Set the variables in the environment or a .env file")
        sys.exit(1)

    port = args.port or app.config['PORT']
    debug = args.debug or os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    host = args.host

    print("=" * 60)
    print("🎓 QUIZ CERTIFICATE SERVICE")
    print("=" * 60)
    print(f"🌐 Server: http://{host}:{port}")
    print(f"🔧 Debug Mode: {debug}")
    print(f"📁 Certificates: {app.extensions['certificate_store'].directory}")
    print("=" * 60)

    rules = sorted(f"{r.rule} -> {','.join(sorted(r.methods - {'HEAD', 'OPTIONS'}))}" for r in app.url_map.iter_rules())
    print("🔎 Registered routes:")
    for line in rules:
        print("  •", line)

    try:
        app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=debug)
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")


if __name__ == '__main__':
    main()
