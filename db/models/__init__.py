from .admin import Admin
from .user import User, UserType, UserStatus
from .feed import Feed, FeedStatus
from .bill import Bill, BillItem, BillStatus, BillRecordStatus, StorageLocation
from .transaction import Transaction

__all__ = [n for n in dir() if n[:1].isupper()]
