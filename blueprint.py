from index import main_bp
from routes.auth import auth_bp
from routes.feed import feed_bp
from routes.user import user_bp
from routes.bill import bill_bp
from routes.payment import payment_bp
from routes.dashboard import dashboard_bp
from routes.report import report_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(feed_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(bill_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(report_bp)
