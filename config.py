import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


@dataclass
class Config:
    """Process configuration for the queen bot"""

    # Logging. stdout belongs to the judge, so console logs go to stderr.
    LOG_LEVEL: str = os.environ.get('QUEEN_LOG_LEVEL', 'INFO').upper()
    LOG_TO_FILE: bool = _env_flag('QUEEN_LOG_TO_FILE')

    # Side-channel logs (off by default: the judge sandbox may not allow writes)
    DECISION_LOG_ENABLED: bool = _env_flag('QUEEN_DECISION_LOG')
    RECORD_INPUT: bool = _env_flag('QUEEN_RECORD_INPUT')

    # Bot name used in log filenames
    BOT_NAME: str = os.environ.get('QUEEN_BOT_NAME', 'queen')

    # Strategy tuning file (None = engine.strategy_config default)
    STRATEGY_CONFIG: str = os.environ.get('STRATEGY_CONFIG', '')

    # Paths
    BASE_DIR: str = os.path.dirname(os.path.abspath(__file__))
    LOG_DIR: str = os.environ.get('QUEEN_LOG_DIR', os.path.join(BASE_DIR, 'logs'))

    @property
    def LOG_FILE_PATH(self) -> str:
        return os.path.join(self.LOG_DIR, f'{self.BOT_NAME}.log')

    @property
    def writes_files(self) -> bool:
        return self.LOG_TO_FILE or self.DECISION_LOG_ENABLED or self.RECORD_INPUT

    def __post_init__(self):
        """Ensure the log directory exists when anything will be written there"""
        if self.writes_files:
            os.makedirs(self.LOG_DIR, exist_ok=True)


# Create global config instance
config = Config()
