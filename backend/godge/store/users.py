import logging
import threading

from godge.core.errors import BadRequestError
from godge.core.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._users: dict[str, str] = {}

    def register(self, username: str, password: str) -> None:
        if not username:
            raise BadRequestError("Username cannot be empty")
        password_hash = hash_password(password)
        with self._lock:
            if username in self._users:
                raise BadRequestError(f"Username {username} is already registered")
            self._users[username] = password_hash
        logger.info("User %s registered", username)

    def authenticate(self, username: str, password: str) -> bool:
        with self._lock:
            password_hash = self._users.get(username)
        if password_hash is None:
            return False
        return verify_password(password, password_hash)

    def usernames(self) -> list[str]:
        with self._lock:
            return sorted(self._users)

    def __contains__(self, username: str) -> bool:
        with self._lock:
            return username in self._users
