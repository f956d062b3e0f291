# admin/setup.py
from decimal import Decimal

from flask import abort, redirect, url_for
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from flask_admin.theme import Bootstrap4Theme
from flask_login import current_user, logout_user

from configs import db


def _is_admin():
    return current_user.is_authenticated and current_user.is_active


class FeedAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not _is_admin():
            abort(401, description="Unauthorized")
        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
        return redirect(url_for("admin.index"))

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        abort(401, description="Unauthorized")


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        abort(401, description="Unauthorized")


class ReadOnlyView(SecureModelView):
    """Bills and the payment ledger only change through the API."""

    can_create = False
    can_edit = False
    can_delete = False


class FeedView(SecureModelView):
    can_delete = False  # deactivate instead
    column_searchable_list = ["name", "brand"]
    column_filters = ["status", "brand"]
    column_list = [
        "id", "name", "brand", "weight", "default_price",
        "shop_stock", "godown_stock", "stock", "status",
    ]
    form_excluded_columns = ["bill_items", "stock", "created_at", "updated_at"]

    def on_model_change(self, form, model, is_created):
        model.stock = Decimal(str(model.shop_stock or 0)) + Decimal(
            str(model.godown_stock or 0)
        )


class UserView(SecureModelView):
    column_searchable_list = ["user_code", "name", "mobile_no"]
    column_filters = ["user_type", "status"]
    column_list = ["user_code", "name", "mobile_no", "user_type", "status", "created_at"]
    form_excluded_columns = ["bills", "transactions", "created_at"]


class BillView(ReadOnlyView):
    column_searchable_list = ["bill_number"]
    column_filters = ["status", "bill_status", "created_at", "user_id"]
    column_list = [
        "bill_number", "user", "total_amount", "paid_amount",
        "pending_amount", "status", "created_at",
    ]
    column_default_sort = ("created_at", True)


class AdminAccountView(SecureModelView):
    column_list = ["mobile_no", "name", "is_active", "created_at"]
    column_exclude_list = ["password_hash"]
    form_excluded_columns = ["password_hash", "created_at"]
    can_create = False  # use seed_admin.py, it hashes the password


def init_admin(app):
    admin = Admin(
        app,
        name="Feed Admin",
        theme=Bootstrap4Theme(),
        index_view=FeedAdminIndex(url="/manage"),
        url="/manage",
    )
    # imported here to avoid circular imports
    from db.models.admin import Admin as AdminAccount
    from db.models.bill import Bill, BillItem
    from db.models.feed import Feed
    from db.models.transaction import Transaction
    from db.models.user import User

    admin.add_view(
        FeedView(Feed, db, category="Inventory", endpoint="admin_feed", name="Feeds")
    )
    admin.add_view(
        UserView(User, db, category="Customers", endpoint="admin_user", name="Users")
    )
    admin.add_view(
        BillView(Bill, db, category="Billing", endpoint="admin_bill", name="Bills")
    )
    admin.add_view(
        ReadOnlyView(
            BillItem, db, category="Billing", endpoint="admin_bill_item", name="Bill Items"
        )
    )
    admin.add_view(
        ReadOnlyView(
            Transaction,
            db,
            category="Billing",
            endpoint="admin_transaction",
            name="Transactions",
        )
    )
    admin.add_view(
        AdminAccountView(
            AdminAccount, db, category="System", endpoint="admin_account", name="Admins"
        )
    )
    admin.add_link(
        MenuLink(name="Logout", category="System", endpoint="admin.admin_logout")
    )
    return admin
