"""
Run the birdproxy API with Flask's built-in server.

Usage:
    python -m api --host 0.0.0.0 --port 29184
"""

import argparse

from dotenv import load_dotenv


def main(argv=None):
    parser = argparse.ArgumentParser(description="BIRD looking glass proxy")
    parser.add_argument("--host", default="127.0.0.1", help="Address to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=29184, help="Port to listen on (default: 29184)")
    parser.add_argument("--env-file", default=".env", help="Environment file to load before settings")
    args = parser.parse_args(argv)

    # Nested settings groups read os.environ only, so load .env up front
    load_dotenv(args.env_file)

    from api.app import create_app
    app = create_app()
    app.run(host=args.host, port=args.port, threaded=True)


if __name__ == "__main__":
    main()
