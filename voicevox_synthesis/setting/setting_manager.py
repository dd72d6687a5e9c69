"""設定関連の処理"""

from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from ..core.runtime import AccelerationMode
from ..error import InvalidInputError
from ..utility.path_utility import get_save_dir
from .model import CorsPolicyMode

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため


@dataclass(frozen=True)
class Setting:
    """設定情報"""

    cors_policy_mode: CorsPolicyMode = CorsPolicyMode.localapps  # リソース共有ポリシー
    allow_origin: str | None = None  # 許可するオリジン
    acceleration_mode: AccelerationMode = AccelerationMode.AUTO
    cpu_num_threads: int = 0  # 0 は利用可能な全スレッドを使う
    open_jtalk_dict_dir: Path | None = None  # None の場合は pyopenjtalk 同梱の辞書
    voice_model_dir: Path | None = None  # 起動時に読み込む音声モデルのディレクトリ
    user_dict_path: Path | None = None  # None の場合は保存ディレクトリ内の既定のパス


_setting_adapter = TypeAdapter(Setting)


USER_SETTING_PATH: Path = get_save_dir() / "setting.yml"
DEFAULT_USER_DICT_PATH: Path = get_save_dir() / "user_dict.json"


class SettingHandler:
    def __init__(self, setting_file_path: Path) -> None:
        """
        設定ファイルの管理
        Parameters
        ----------
        setting_file_path : Path
            設定ファイルのパス。存在しない場合はデフォルト値を設定。
        """
        self.setting_file_path = setting_file_path

    def load(self) -> Setting:
        """設定値をファイルから読み込む。"""
        if not self.setting_file_path.is_file():
            # 設定ファイルが存在しないためデフォルト値を取得
            return Setting()

        setting = yaml.safe_load(self.setting_file_path.read_text(encoding="utf-8"))
        if setting is None:
            # 空のファイル
            setting = {}
        try:
            return _setting_adapter.validate_python(setting)
        except ValidationError as e:
            raise InvalidInputError(
                f"設定ファイル {self.setting_file_path} の内容が不正です: {e}",
                path=str(self.setting_file_path),
            ) from e

    def save(self, settings: Setting) -> None:
        """設定値をファイルへ書き込む。"""
        settings_dict: dict[str, Any] = _setting_adapter.dump_python(settings)

        for key, value in settings_dict.items():
            if isinstance(value, Enum):
                settings_dict[key] = value.value
            elif isinstance(value, Path):
                settings_dict[key] = str(value)

        self.setting_file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.setting_file_path, mode="w", encoding="utf-8") as f:
            yaml.safe_dump(settings_dict, f, allow_unicode=True)
        logger.info(f"Saved settings to {self.setting_file_path}")
