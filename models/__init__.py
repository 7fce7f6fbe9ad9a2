from models.base_model import Base, utcnow
from models.contact_form import ContactForm
from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import Role, User

__all__ = ["Base", "ContactForm", "DBStorage", "RefreshToken", "Role", "User", "utcnow"]
