import json
import logging
import os
from dataclasses import asdict, dataclass, fields

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".clipkeep")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    storage: str = "json"  # "json" or "qsettings"
    history_file: str = os.path.join(CONFIG_DIR, "history.json")
    clipboard_backend: str = "auto"
    log_level: str = "INFO"

    def __post_init__(self):
        self.history_file = os.path.expanduser(self.history_file)

    @classmethod
    def load(cls, path: str = CONFIG_PATH) -> "Config":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            config = cls()
            try:
                config.save(path)
            except OSError as e:
                logger.warning(f"Could not write default config to {path}: {e}")
            return config
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
            return cls()

        if not isinstance(data, dict):
            logger.warning("Failed to load config: expected a JSON object, using defaults")
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: str = CONFIG_PATH) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)


def setup_logging(level: str = "INFO") -> None:
    """Console-only logging, no log file"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
