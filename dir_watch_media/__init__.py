"""Watch a directory and feed the selected file into a media consumer."""
from .watch import DirWatchMedia

__all__ = ["DirWatchMedia"]

__version__ = "0.1.0"
