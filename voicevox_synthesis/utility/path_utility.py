"""パスに関する utility"""

import sys
from pathlib import Path

from platformdirs import user_data_dir


def is_development() -> bool:
    """
    動作環境が開発版であるか否かを返す。
    Pyinstallerでコンパイルされていない場合は開発環境とする。
    """
    # pyinstallerでビルドをした際はsys.frozenが設定される
    return not getattr(sys, "frozen", False)


def get_save_dir() -> Path:
    """ユーザー辞書や設定ファイルの保存先ディレクトリを指すパスを取得する。"""
    app_name = "voicevox-synthesis-dev" if is_development() else "voicevox-synthesis"
    return Path(user_data_dir(app_name))
