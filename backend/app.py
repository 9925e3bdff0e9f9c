# app.py
from flask import Flask, jsonify, request, Blueprint
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from flask_cors import CORS
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
import os
from dotenv import load_dotenv
import importlib
from datetime import datetime

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migrations')


def _env_flag(name, default='false'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def get_database_uri(url, key):
    """Build the SQLAlchemy URI for the remote store, or the local fallback"""
    if url and key:
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        parsed = make_url(url)
        print(f"[DB] Using remote store ({parsed.get_backend_name()})")
        # SQLite has no credentials; server databases take the key as password
        if parsed.get_backend_name() == 'sqlite':
            return url
        return parsed.set(password=key).render_as_string(hide_password=False)

    print("[DB] Remote store not configured, using mock storage")
    return "sqlite:///:memory:"


def register_blueprints(app):
    """Register all blueprints with proper error handling"""
    print("\n" + "="*60)
    print("[INIT] REGISTERING BLUEPRINTS")
    print("="*60)

    blueprints_to_register = [
        ('auth', 'auth_bp', '/auth'),
        ('users', 'users_bp', '/users'),
        ('careers', 'careers_bp', '/careers'),
        ('classrooms', 'classrooms_bp', '/classrooms'),
        ('events', 'events_bp', '/events'),
        ('notifications', 'notifications_bp', '/notifications'),
        ('chat', 'chat_bp', '/chat'),
        ('justifications', 'justifications_bp', '/justifications'),
        ('finals', 'finals_bp', '/finals'),
        ('courses', 'courses_bp', '/courses'),
        ('assistant', 'assistant_bp', '/assistant'),
    ]

    registered_count = 0

    for module_name, bp_name, url_prefix in blueprints_to_register:
        try:
            module = importlib.import_module(f'routes.{module_name}')
            blueprint = getattr(module, bp_name)

            if isinstance(blueprint, Blueprint):
                app.register_blueprint(blueprint, url_prefix=url_prefix)
                registered_count += 1
                print(f"   [OK] Registered '{blueprint.name}' at {url_prefix}")
            else:
                print(f"   [ERR] FAILED: {bp_name} is not a Blueprint object")

        except ImportError as e:
            print(f"   [ERR] FAILED: Cannot import routes.{module_name}")
            print(f"      Error: {e}")
            raise
        except AttributeError:
            print(f"   [ERR] FAILED: No '{bp_name}' found in routes.{module_name}")
            raise

    print(f"[SUMMARY] Registered {registered_count}/{len(blueprints_to_register)} blueprints")
    print("="*60 + "\n")


def setup_database(app):
    """Create the remote schema, through migrations when they exist"""
    with app.app_context():
        print("[INIT] Setting up database...")

        # Import all models to ensure they're registered
        import models  # noqa: F401

        if os.path.isdir(MIGRATIONS_DIR):
            try:
                print("[MIGRATE] Running migrations...")
                upgrade(directory=MIGRATIONS_DIR)
                print("[OK] Migrations applied successfully")
                return
            except SQLAlchemyError as e:
                print(f"[WARN] Migration error, falling back to create_all: {e}")

        db.create_all()
        print("[OK] Tables created directly")


def create_app(config_overrides=None):
    """Create and configure the Flask application"""
    load_dotenv()

    app = Flask(__name__)

    # ============ CONFIGURATION ============
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'isfd26-portal-dev-key')
    app.config['DATABASE_URL'] = os.environ.get('DATABASE_URL', '')
    app.config['DATABASE_KEY'] = os.environ.get('DATABASE_KEY', '')
    app.config['MOCK_STORAGE_DIR'] = os.environ.get('MOCK_STORAGE_DIR', '')
    app.config['SEED_REMOTE_DATABASE'] = _env_flag('SEED_REMOTE_DATABASE')
    app.config['GEMINI_API_KEY'] = os.environ.get('GEMINI_API_KEY', '')
    app.config['GEMINI_MODEL'] = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB, group avatars arrive as base64
    app.config['DEBUG'] = os.environ.get('FLASK_ENV') == 'development'

    if config_overrides:
        app.config.update(config_overrides)

    app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri(
        app.config['DATABASE_URL'], app.config['DATABASE_KEY']
    )
    if not app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_recycle': 300,
            'pool_pre_ping': True,
        }

    # ============ INITIALIZE EXTENSIONS ============
    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)
    CORS(app, resources={r"/*": {"origins": "*"}})

    # ============ SELECT BACKEND ============
    from services import database
    database.init_app(app)

    if database.is_remote(app):
        setup_database(app)

    with app.app_context():
        database.initialize_database()

    # ============ REGISTER BLUEPRINTS ============
    register_blueprints(app)

    # ============ BASIC ROUTES ============
    @app.route('/')
    def home():
        """API home page"""
        return jsonify({
            'service': 'ISFD 26 Portal API',
            'version': '1.0.0',
            'status': 'active',
            'timestamp': datetime.utcnow().isoformat(),
            'backend': database.backend_name(app),
            'endpoints': {
                'health': '/health',
                'auth': '/auth/*',
                'users': '/users/*',
                'careers': '/careers/*',
                'classrooms': '/classrooms/*',
                'events': '/events/*',
                'notifications': '/notifications/*',
                'chat': '/chat/*',
                'justifications': '/justifications/*',
                'finals': '/finals/*',
                'courses': '/courses/*',
                'assistant': '/assistant/*'
            }
        })

    @app.route('/health')
    def health():
        """Health check endpoint"""
        db_status = 'not used'
        if database.is_remote(app):
            try:
                db.session.execute(text('SELECT 1'))
                db_status = 'connected'
            except SQLAlchemyError as e:
                db_status = f'error: {str(e)}'

        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.utcnow().isoformat(),
            'backend': database.backend_name(app),
            'database': db_status,
            'registered_blueprints': list(app.blueprints.keys())
        })

    # ============ ERROR HANDLERS ============
    from services.validation import ValidationError

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify({
            'success': False,
            'error': 'Validation Error',
            'message': str(error)
        }), 400

    @app.errorhandler(SQLAlchemyError)
    def storage_error(error):
        app.logger.error(f"Storage error on {request.path}: {error}")
        return jsonify({
            'success': False,
            'error': 'Storage Error',
            'message': 'The data store rejected the operation.',
            'timestamp': datetime.utcnow().isoformat()
        }), 500

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Not Found',
            'message': f'The requested endpoint {request.path} does not exist.',
            'timestamp': datetime.utcnow().isoformat()
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Internal Server Error: {error}")
        return jsonify({
            'success': False,
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred on the server.',
            'timestamp': datetime.utcnow().isoformat(),
            'request_path': request.path
        }), 500

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'success': False,
            'error': 'Bad Request',
            'message': str(error),
            'timestamp': datetime.utcnow().isoformat()
        }), 400

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method Not Allowed',
            'message': f'The method {request.method} is not allowed for this endpoint.',
            'path': request.path
        }), 405

    @app.route('/favicon.ico')
    def favicon():
        return '', 204

    return app


# ============ MAIN ENTRY POINT ============
if __name__ == '__main__':
    # Import by module name so models and routes share the same extensions
    from app import create_app as create_portal_app
    app = create_portal_app()
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_ENV') == 'development'

    print("\n" + "="*60)
    print("[START] ISFD 26 PORTAL API")
    print("="*60)
    print(f"[ENV] Environment: {'Development' if debug else 'Production'}")
    print(f"[PORT] Port: {port}")
    print(f"[DB] Backend: {app.extensions['portal_backend'].name}")
    print(f"[URL] URL: http://localhost:{port}")
    print(f"[HEALTH] Health: http://localhost:{port}/health")
    print("="*60 + "\n")

    app.run(host='0.0.0.0', port=port, debug=debug)
