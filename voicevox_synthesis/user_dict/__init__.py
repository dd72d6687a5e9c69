from .model import UserDictWord, WordTypes, parse_word_type
from .user_dict import UserDict
from .user_dict_word import create_word

__all__ = [
    "UserDict",
    "UserDictWord",
    "WordTypes",
    "create_word",
    "parse_word_type",
]
