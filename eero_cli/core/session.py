"""
Session token persistence.

The store keeps exactly one token in a plain text file. Loading tells
"never authenticated" (NoSessionFound) apart from a broken medium
(PersistenceError).
"""

import os
import stat
import tempfile
from pathlib import Path

from eero_cli.core.errors import NoSessionFound, PersistenceError, ValidationError
from eero_cli.core.logging import get_logger

DEFAULT_SESSION_FILENAME = ".eero_session"

logger = get_logger(__name__)


def default_session_path() -> Path:
    """Resolve the session file from EERO_SESSION_FILE, SESSION_FILE or the home directory."""
    env_path = os.environ.get("EERO_SESSION_FILE") or os.environ.get("SESSION_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / DEFAULT_SESSION_FILENAME


class SessionStore:
    """Reads and writes the session token file."""

    def __init__(self, path: Path | str | None = None):
        """
        Initialize session store

        Args:
            path: Session file path (default: EERO_SESSION_FILE or ~/.eero_session)
        """
        self.path = Path(path).expanduser() if path else default_session_path()

    def exists(self) -> bool:
        """Check if the session file exists"""
        return self.path.is_file()

    def load(self) -> str:
        """
        Load the stored session token.

        Returns:
            The token, stripped of surrounding whitespace

        Raises:
            NoSessionFound: If the file is missing or empty
            PersistenceError: If the file cannot be read
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NoSessionFound(
                f"{self.path} does not exist. Use 'eero auth' to create it",
                details={"path": str(self.path)},
            )
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}", details={"path": str(self.path)})

        token = content.strip()
        if not token:
            raise NoSessionFound(f"{self.path} is empty. Use 'eero auth' to log in", details={"path": str(self.path)})

        logger.debug("Loaded session token from %s", self.path)
        return token

    def save(self, token: str) -> None:
        """
        Save the session token, replacing any previous one.

        The token goes to a temporary file in the same directory which then
        replaces the target, readable by the owner only.

        Raises:
            ValidationError: If the token is empty
            PersistenceError: If the file cannot be written
        """
        if not token or not token.strip():
            raise ValidationError("Refusing to save an empty session token")

        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".eero_session.", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(token.strip())
            os.chmod(tmp_name, stat.S_IRUSR | stat.S_IWUSR)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not save session to {self.path}: {e}", details={"path": str(self.path)})

        logger.debug("Saved session token to %s", self.path)
