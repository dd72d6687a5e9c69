from .model import CorsPolicyMode
from .setting_manager import (
    DEFAULT_USER_DICT_PATH,
    USER_SETTING_PATH,
    Setting,
    SettingHandler,
)

__all__ = [
    "DEFAULT_USER_DICT_PATH",
    "USER_SETTING_PATH",
    "CorsPolicyMode",
    "Setting",
    "SettingHandler",
]
