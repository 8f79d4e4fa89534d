"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
from flask import Flask, request, session, redirect, jsonify, render_template_string


def create_app():
    """Create and configure the Flask application."""
    from app.logging_config import configure_logging
    from app.config import SECRET_KEY

    app = Flask(__name__)

    configure_logging(app)

    app.secret_key = SECRET_KEY

    # ── Admin password gate ─────────────────────────────────────────────
    from app.config import ADMIN_PASSWORD

    LOGIN_PAGE = '''
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Admin Login — AI Content Strategist</title>
        <style>body { font-family: sans-serif; background:#f4f5f7; }</style>
    </head>
    <body>
        <div style="background:white;border-radius:12px;box-shadow:0 2px 8px rgba(0,0,0,0.06);padding:2.5rem;max-width:360px;margin:10vh auto;">
            <h1 style="font-size:1.1rem;margin:0 0 .25rem;">Script Generator Admin</h1>
            <p style="font-size:.85rem;opacity:.5;margin:0 0 1.5rem;">Enter password to continue</p>
            {% if error %}
            <p style="font-size:.75rem;color:#d93025;">Wrong password</p>
            {% endif %}
            <form method="POST" action="/login">
                <input type="password" name="password" autofocus placeholder="Password"
                       style="width:100%;padding:.6rem;margin-bottom:1rem;border:1px solid #ccd;border-radius:8px;">
                <button type="submit" style="width:100%;padding:.6rem;border:0;border-radius:8px;background:#1a56db;color:white;cursor:pointer;">
                    Log in
                </button>
            </form>
        </div>
    </body>
    </html>
    '''

    @app.before_request
    def require_admin_login():
        if not ADMIN_PASSWORD:
            return  # No password set: open access (local dev)
        if not request.path.startswith('/admin'):
            return
        if session.get('authenticated'):
            return
        if request.path.startswith('/admin/api/'):
            return jsonify({'error': 'Authentication required'}), 401
        return redirect('/login')

    @app.route('/login', methods=['GET', 'POST'])
    def login():
        if request.method == 'POST':
            if ADMIN_PASSWORD and request.form.get('password') == ADMIN_PASSWORD:
                session['authenticated'] = True
                return redirect('/admin/api/stats')
            return render_template_string(LOGIN_PAGE, error=True), 401
        return render_template_string(LOGIN_PAGE, error=False)

    @app.route('/logout')
    def logout():
        session.clear()
        return redirect('/login')

    # Register blueprints
    from app.routes.health import bp as health_bp
    from app.routes.intake import bp as intake_bp
    from app.routes.results import bp as results_bp
    from app.routes.admin import bp as admin_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(intake_bp)
    app.register_blueprint(results_bp)
    app.register_blueprint(admin_bp)

    # Rate limiters share one counter store (Redis unless RATE_LIMIT_STORAGE=memory)
    from app.services.rate_limiter import init_limiters, build_store
    init_limiters(build_store())

    # Import models so Base.metadata knows about them.
    # Schema is managed by Alembic, no create_all() here.
    import importlib
    importlib.import_module('app.models.lead')
    importlib.import_module('app.models.generated_script')
    importlib.import_module('app.models.user_profile')

    return app
