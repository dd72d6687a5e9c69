"""
設定に関して API と内部実装が共有するモデル（データ構造）

モデルの注意点は `voicevox_synthesis/model.py` の module docstring を確認すること。
"""

from enum import Enum


class CorsPolicyMode(str, Enum):
    """
    CORSの許可モード
    """

    all = "all"  # 全てのオリジンからのリクエストを許可
    localapps = "localapps"  # ローカルアプリケーションからのリクエストを許可
