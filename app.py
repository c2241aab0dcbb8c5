import secrets
from decimal import Decimal, InvalidOperation, localcontext
from flask import Flask
from flask_wtf.csrf import CSRFProtect
from config import Config
from routes.users import users_bp
from routes.google import google_bp
from routes.kakeibo import kakeibo_bp, summary_api

csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    csrf.init_app(app)
    # JSON endpoints called by scripts, not by the page's forms
    csrf.exempt(users_bp)
    csrf.exempt(google_bp)
    csrf.exempt(summary_api)

    app.register_blueprint(users_bp)
    app.register_blueprint(google_bp)
    app.register_blueprint(kakeibo_bp)

    app.jinja_env.filters['clamp'] = clamp_filter
    app.jinja_env.filters['peso'] = peso_filter

    return app


def clamp_filter(value, min_val=0, max_val=100):
    try:
        return max(min(float(value), max_val), min_val)
    except (ValueError, TypeError):
        return 0


def peso_filter(value):
    # room for every digit up to double range
    with localcontext() as ctx:
        ctx.prec = 400
        try:
            amount = Decimal(str(value)).quantize(Decimal('0.01'))
        except (InvalidOperation, ValueError):
            amount = Decimal(0)
        if not amount.is_finite():
            amount = Decimal(0)
        sign = '-' if amount < 0 else ''
        return f"{sign}₱{abs(amount):,.2f}"


app = create_app()
