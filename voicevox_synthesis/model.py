"""
API と内部実装が共有するモデル

このモジュールで定義されるモデル（データ構造）は API と合成パイプラインの 2 箇所から使われる。そのため
- モデルの変更は API 変更となるため慎重に検討する。
- モデルの docstring や Field は API スキーマとして使われるため、ユーザー向けに丁寧に書く。
- モデルクラスは FastAPI の制約から `BaseModel` を継承しなければならない。

Python 側の属性名は snake_case、JSON 上の名前は VOICEVOX ENGINE 互換の camelCase とする。
入力はどちらの名前でも受け付ける。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

from voicevox_synthesis.tts_pipeline.model import AccentPhrase

DEFAULT_SAMPLING_RATE = 24000


class AudioQuery(BaseModel):
    """
    音声合成用のクエリ
    """

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    accent_phrases: list[AccentPhrase] = Field(description="アクセント句のリスト")
    speed_scale: float = Field(alias="speedScale", description="全体の話速")
    pitch_scale: float = Field(alias="pitchScale", description="全体の音高")
    intonation_scale: float = Field(alias="intonationScale", description="全体の抑揚")
    volume_scale: float = Field(alias="volumeScale", description="全体の音量")
    pre_phoneme_length: float = Field(
        alias="prePhonemeLength", description="音声の前の無音時間"
    )
    post_phoneme_length: float = Field(
        alias="postPhonemeLength", description="音声の後の無音時間"
    )
    pause_length: float | None = Field(
        default=None,
        alias="pauseLength",
        description="句読点などの無音時間。nullのときは無視される。デフォルト値はnull",
    )
    pause_length_scale: float = Field(
        default=1,
        alias="pauseLengthScale",
        description="句読点などの無音時間（倍率）。デフォルト値は1",
    )
    output_sampling_rate: int = Field(
        alias="outputSamplingRate",
        description="音声データの出力サンプリングレート",
        gt=0,
    )
    output_stereo: bool = Field(
        alias="outputStereo", description="音声データをステレオ出力するか否か"
    )
    kana: str | SkipJsonSchema[None] = Field(
        default=None,
        description="[読み取り専用]AquesTalk 風記法によるテキスト。音声合成用のクエリとしては無視される",
    )

    @classmethod
    def from_accent_phrases(
        cls, accent_phrases: list[AccentPhrase], kana: str | None = None
    ) -> "AudioQuery":
        """既定の全体パラメータでクエリを生成する。"""
        return cls(
            accent_phrases=accent_phrases,
            speed_scale=1.0,
            pitch_scale=0.0,
            intonation_scale=1.0,
            volume_scale=1.0,
            pre_phoneme_length=0.1,
            post_phoneme_length=0.1,
            pause_length=None,
            pause_length_scale=1.0,
            output_sampling_rate=DEFAULT_SAMPLING_RATE,
            output_stereo=False,
            kana=kana,
        )
