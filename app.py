from dotenv import load_dotenv
load_dotenv()
from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from sqlalchemy import text
from werkzeug.middleware.proxy_fix import ProxyFix
from datetime import datetime
import os

# Use Flask-SQLAlchemy's default declarative base.
from extensions import db
from errors import register_error_handlers


def _is_production() -> bool:
    return bool(os.getenv("RENDER") or os.getenv("FLASK_ENV") == "production")


# -------------------------------
# Client IP resolution
# -------------------------------
def get_client_ip() -> str:
    """Return the best-effort client IP.

    After ProxyFix, request.access_route[0] should be the real client IP.
    Falls back to request.remote_addr for local development.
    """
    if request.access_route:
        return request.access_route[0]
    return request.remote_addr or "0.0.0.0"


# Rate limiting
# - In production, set RATE_LIMIT_STORAGE_URL to a Redis URL for multi-instance correctness.
# - Defaults to in-memory storage.
limiter = Limiter(
    get_client_ip,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URL", "memory://"),
)


def _database_url() -> str:
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        if os.getenv("RENDER") == "true":
            raise RuntimeError("DATABASE_URL missing on Render; refusing to use SQLite.")
        db_url = "sqlite:///carbon_tracker.db"
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)
    return db_url


def create_app(test_config=None):
    app = Flask(__name__)

    app.config["SQLALCHEMY_DATABASE_URI"] = _database_url()
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }
    if test_config:
        app.config.update(test_config)

    # Behind a reverse proxy request.remote_addr is the proxy; trust one hop.
    if _is_production():
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Initialize extensions
    db.init_app(app)
    CORS(app)
    limiter.init_app(app)
    register_error_handlers(app)

    @app.after_request
    def add_api_headers(resp):
        resp.headers.setdefault("Cache-Control", "no-store")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        return resp

    # ==================== HEALTH CHECK ====================

    @app.route("/api/health", methods=["GET"])
    def health_check():
        try:
            db.session.execute(text("SELECT 1"))
            return jsonify({
                "success": True,
                "status": "healthy",
                "timestamp": datetime.utcnow().isoformat(),
                "database": "connected",
                "version": "1.0.0",
            })
        except Exception as e:
            app.logger.exception("Health check failed")
            return jsonify({
                "success": False,
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat(),
            }), 500

    # Models must be imported before create_all() so their tables are registered.
    import models_users  # noqa: F401
    import models_activity  # noqa: F401
    import models_factors  # noqa: F401
    import models_goals  # noqa: F401
    import models_badges  # noqa: F401

    from users import users_api
    from activities import activities_api
    from emissions import factors_api
    from dashboard import dashboard_api
    from goals import goals_api
    from challenges import challenges_api
    from badges import badges_api
    from tips import tips_api

    app.register_blueprint(users_api)
    app.register_blueprint(activities_api)
    app.register_blueprint(factors_api)
    app.register_blueprint(dashboard_api)
    app.register_blueprint(goals_api)
    app.register_blueprint(challenges_api)
    app.register_blueprint(badges_api)
    app.register_blueprint(tips_api)

    with app.app_context():
        db.create_all()

    return app


app = create_app()


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    print("=" * 60)
    print("Carbon Footprint Tracker API")
    print("=" * 60)
    print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
    print(f"Health: http://localhost:{port}/api/health")
    print("=" * 60)

    app.run(debug=debug, port=port)
