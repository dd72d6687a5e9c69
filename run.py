import argparse
import sys
from io import TextIOWrapper
from pathlib import Path
from typing import TextIO

import uvicorn

from voicevox_synthesis.app.application import generate_app
from voicevox_synthesis.core.onnx_runtime import OnnxRuntime
from voicevox_synthesis.core.runtime import (
    InferenceRuntime,
    InitializeOptions,
    parse_acceleration_mode,
)
from voicevox_synthesis.dev.core.mock import MockRuntime
from voicevox_synthesis.setting.setting_manager import (
    DEFAULT_USER_DICT_PATH,
    USER_SETTING_PATH,
    SettingHandler,
)
from voicevox_synthesis.tts_pipeline.open_jtalk import OpenJtalk, bundled_dict_dir
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer
from voicevox_synthesis.user_dict.user_dict import UserDict
from voicevox_synthesis.voice_model import VoiceModel


def set_output_log_utf8() -> None:
    """標準出力と標準エラー出力の出力形式を UTF-8 ベースに切り替える"""

    # NOTE: for 文で回せないため関数内関数で実装している
    def _prepare_utf8_stdio(stdio: TextIO) -> TextIO:
        """UTF-8 ベースの標準入出力インターフェイスを用意する"""
        if isinstance(stdio, TextIOWrapper):
            stdio.reconfigure(encoding="utf-8", errors="backslashreplace")
        return stdio

    # NOTE:
    # `sys.std*` はコンソールがない環境だと `None` をとる (出典: https://docs.python.org/ja/3/library/sys.html#sys.__stdin__ )  # noqa: B950
    # これは Python コードによって `sys.std*` が上書きされない限り変わらない。
    if sys.stdout is not None:
        sys.stdout = _prepare_utf8_stdio(sys.stdout)
    if sys.stderr is not None:
        sys.stderr = _prepare_utf8_stdio(sys.stderr)


def read_cli_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="VOICEVOX Synthesis の HTTP サーバーを起動します。"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="接続を受け付けるホストアドレスです。",
    )
    parser.add_argument(
        "--port", type=int, default=50021, help="接続を受け付けるポート番号です。"
    )
    parser.add_argument(
        "--setting_file",
        type=Path,
        default=USER_SETTING_PATH,
        help="設定ファイルのパスです。存在しない場合は既定値で起動します。",
    )
    parser.add_argument(
        "--voice_model_dir",
        type=Path,
        default=None,
        help="起動時に読み込む音声モデル (*.vvm) を置いたディレクトリのパスです。",
    )
    parser.add_argument(
        "--open_jtalk_dict_dir",
        type=Path,
        default=None,
        help="OpenJTalk のシステム辞書のディレクトリです。指定しない場合は pyopenjtalk 同梱の辞書を使います。",
    )
    parser.add_argument(
        "--acceleration_mode",
        type=str,
        default=None,
        help="ハードウェアアクセラレーションモードです。AUTO, CPU, GPU のいずれかを指定します。",
    )
    parser.add_argument(
        "--cpu_num_threads",
        type=int,
        default=None,
        help="推論に用いるスレッド数です。0 の場合は利用可能な全スレッドを使います。",
    )
    parser.add_argument(
        "--enable_mock",
        action="store_true",
        help="推論ランタイムの代わりにモックを使います。音声モデルの重みは読み込まれません。",
    )
    parser.add_argument(
        "--user_dict_path",
        type=Path,
        default=None,
        help="ユーザー辞書ファイルのパスです。",
    )
    parser.add_argument(
        "--output_log_utf8",
        action="store_true",
        help="ログ出力をUTF-8でおこないます。",
    )
    return parser.parse_args()


def main() -> None:
    """音声合成エンジンを起動する"""
    args = read_cli_arguments()

    if args.output_log_utf8:
        set_output_log_utf8()

    # 引数の指定を設定ファイルの値より優先する
    settings = SettingHandler(args.setting_file).load()
    acceleration_mode = (
        parse_acceleration_mode(args.acceleration_mode)
        if args.acceleration_mode is not None
        else settings.acceleration_mode
    )
    cpu_num_threads: int = (
        args.cpu_num_threads
        if args.cpu_num_threads is not None
        else settings.cpu_num_threads
    )
    open_jtalk_dict_dir: Path = (
        args.open_jtalk_dict_dir or settings.open_jtalk_dict_dir or bundled_dict_dir()
    )
    voice_model_dir: Path | None = args.voice_model_dir or settings.voice_model_dir
    user_dict_path: Path = (
        args.user_dict_path or settings.user_dict_path or DEFAULT_USER_DICT_PATH
    )

    open_jtalk = OpenJtalk(open_jtalk_dict_dir)
    user_dict = UserDict()
    if user_dict_path.is_file():
        user_dict.load(user_dict_path)
        open_jtalk.use_user_dict(user_dict)

    runtime: InferenceRuntime = MockRuntime() if args.enable_mock else OnnxRuntime()
    synthesizer = Synthesizer(
        runtime,
        open_jtalk,
        InitializeOptions(
            acceleration_mode=acceleration_mode, cpu_num_threads=cpu_num_threads
        ),
    )
    if voice_model_dir is not None:
        for path in sorted(voice_model_dir.glob("*.vvm")):
            synthesizer.load_voice_model(VoiceModel.from_path(path))

    allow_origin = None
    if settings.allow_origin is not None:
        allow_origin = settings.allow_origin.split(" ")

    app = generate_app(
        synthesizer,
        open_jtalk,
        user_dict,
        user_dict_path,
        settings.cors_policy_mode,
        allow_origin,
    )
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
