from .path_utility import get_save_dir, is_development
from .text_utility import (
    count_mora,
    replace_hankaku_alphabets_with_zenkaku,
    replace_zenkaku_alphabets_with_hankaku,
    validate_pronunciation,
)

__all__ = [
    "get_save_dir",
    "is_development",
    "count_mora",
    "replace_hankaku_alphabets_with_zenkaku",
    "replace_zenkaku_alphabets_with_hankaku",
    "validate_pronunciation",
]
