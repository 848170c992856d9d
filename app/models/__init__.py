from app.models.user import UserAccount
from app.models.progress import ReviewProgress

__all__ = [
    'UserAccount',
    'ReviewProgress',
]
