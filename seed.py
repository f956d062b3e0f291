# seed.py
"""Demo catalogue, customers and a few bills for a fresh database."""
from configs import db
from dao import bill as bill_dao
from dao import feed as feed_dao
from dao import payment as payment_dao
from dao import user as user_dao
from db.models.feed import Feed
from db.models.user import User
from app import create_app

app = create_app()


# -------- Feeds --------
def seed_feeds():
    feeds = [
        # name, brand, weight kg, price, shop, godown
        ("Tiwana", "Premium", 25, 850, 100, 400),
        ("Tiwana", "Premium", 50, 1650, 50, 250),
        ("Tiwana", "Standard", 25, 750, 40, 160),
        ("Tiwana", "Standard", 50, 1450, 30, 120),
        ("Cattle Feed", "Premium", 25, 900, 80, 320),
        ("Cattle Feed", "Premium", 50, 1750, 50, 200),
    ]
    for name, brand, weight, price, shop, godown in feeds:
        exists = Feed.query.filter_by(name=name, brand=brand, weight=weight).first()
        if exists:
            continue
        feed_dao.create_feed(
            name, weight, price, brand=brand, shop_stock=shop, godown_stock=godown
        )
    print("✓ Feeds seeded")


# -------- Users --------
def seed_users():
    users = [
        ("Rajesh Kumar", "9876543210", "123 Main Street, Village A", "rajesh@example.com", "BMC"),
        ("Priya Sharma", "9876543211", "456 Farm Road, Village B", "priya@example.com", "BMC"),
        ("Amit Patel", "9876543212", "789 Dairy Lane, Village C", None, "BMC"),
        ("Sunita Devi", "9876543213", "321 Cow Street, Village D", "sunita@example.com", "Dabhadi"),
        ("Vikram Singh", "9876543214", "654 Milk Road, Village E", None, "Customer"),
    ]
    for name, mobile, address, email, user_type in users:
        if User.query.filter_by(mobile_no=mobile).first():
            continue
        user_dao.create_user(name, mobile, address=address, email=email, user_type=user_type)
    print("✓ Users seeded")


# -------- Bills --------
def seed_bills():
    if bill_dao.list_bills():
        print("… bills already present, skipped")
        return
    feeds = Feed.query.order_by(Feed.id).all()
    users = User.query.order_by(User.id).all()

    def line(feed, qty, location="godown"):
        return {
            "feed_id": feed.id,
            "quantity": qty,
            "unit_price": feed.default_price,
            "storage_location": location,
        }

    # paid, partial (then topped up), pending
    bill_dao.create_bill(users[0].id, [line(feeds[0], 3, "shop")], status="paid")
    partial = bill_dao.create_bill(
        users[1].id,
        [line(feeds[1], 2), line(feeds[2], 2)],
        status="partial",
        paid_amount=3000,
    )
    payment_dao.record_payment(partial.id, 500, description="Cash top-up")
    bill_dao.create_bill(users[3].id, [line(feeds[4], 5), line(feeds[5], 1, "shop")])
    print("✓ Bills seeded")


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        seed_feeds()
        seed_users()
        seed_bills()
        print("✅ Demo data ready")
