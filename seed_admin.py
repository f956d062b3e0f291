# seed_admin.py
import os

from app import create_app
from dao import admin as admin_dao

app = create_app()

if __name__ == "__main__":
    mobile_no = os.getenv("ADMIN_MOBILE", "7410537296")
    password = os.getenv("ADMIN_PASSWORD", "admin123")
    name = os.getenv("ADMIN_NAME", "Admin")

    with app.app_context():
        admin_dao.create_or_update_admin(mobile_no, password, name=name)

    print(f"✓ Admin {mobile_no} ready, change the password after first login")
