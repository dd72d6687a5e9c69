"""音声合成器と音声合成フロー"""

import copy
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..core.inference_adapter import InferenceAdapter
from ..core.model_registry import ModelRegistry
from ..core.runtime import (
    DeviceSupport,
    InferenceRuntime,
    InitializeOptions,
    select_device,
)
from ..metas.metas import SpeakerMeta, StyleId, VoiceModelId
from ..model import AudioQuery
from ..voice_model import VoiceModel
from .audio_postprocessing import raw_wave_to_output_wave, to_wav_bytes
from .kana_converter import create_kana, parse_kana
from .model import AccentPhrase, Mora
from .mora_mapping import mora_phonemes_to_mora_kana
from .phoneme import Phoneme
from .text_analyzer import TextAnalyzer, full_context_labels_to_accent_phrases

# 疑問文語尾定数
UPSPEAK_LENGTH = 0.15
UPSPEAK_PITCH_ADD = 0.3
UPSPEAK_PITCH_MAX = 6.5

FRAMERATE = 93.75  # 24000 / 256 [frame/sec]
_SAMPLES_PER_FRAME = 256

# 音声波形生成の前後に付加する無音のフレーム長。0.4 秒 * 24000Hz / 256 を丸めた値
DEFAULT_PADDING_FRAME_LENGTH = 38


@dataclass(frozen=True)
class SynthesisOptions:
    """音声波形生成のオプション"""

    enable_interrogative_upspeak: bool = True  # 疑問文の語尾を自動で上げるか否か
    padding_frame_length: int = DEFAULT_PADDING_FRAME_LENGTH  # 生成前後に付加する無音フレーム長
    return_features: bool = False  # 音声波形生成モデルへの入力を結果に含めるか否か


@dataclass(frozen=True)
class DecoderFeature:
    """音声波形生成モデルへの入力。前後の無音フレームを含む。"""

    phoneme: NDArray[np.float32]  # shape=(フレーム長, 音素数)
    f0: NDArray[np.float32]  # shape=(フレーム長,)
    padding_frame_length: int


@dataclass(frozen=True)
class SynthesisResult:
    """音声波形生成の結果"""

    wav: bytes  # 16bit PCM の WAV ファイル
    features: DecoderFeature | None = None


def to_flatten_moras(accent_phrases: list[AccentPhrase]) -> list[Mora]:
    """アクセント句系列からモーラ系列を抽出する。"""
    moras: list[Mora] = []
    for accent_phrase in accent_phrases:
        moras += accent_phrase.moras
        if accent_phrase.pause_mora:
            moras += [accent_phrase.pause_mora]
    return moras


def _to_flatten_phonemes(moras: list[Mora]) -> list[Phoneme]:
    """モーラ系列から音素系列を抽出する"""
    phonemes: list[Phoneme] = []
    for mora in moras:
        if mora.consonant:
            phonemes += [Phoneme(mora.consonant)]
        phonemes += [Phoneme(mora.vowel)]
    return phonemes


def _create_one_hot(accent_phrase: AccentPhrase, index: int) -> NDArray[np.int64]:
    """
    アクセント句から指定インデックスのみが 1 の配列 (onehot) を生成する。

    長さ `len(moras)` な配列の指定インデックスを 1 とし、pause_mora を含む場合は末尾に 0 が付加される。
    """
    accent_onehot = np.zeros(len(accent_phrase.moras))
    accent_onehot[index] = 1
    onehot = np.append(accent_onehot, [0] if accent_phrase.pause_mora else [])
    return onehot.astype(np.int64)


def _generate_silence_mora(length: float) -> Mora:
    """音の長さを指定して無音モーラを生成する。"""
    return Mora(text="　", vowel="sil", vowel_length=length, pitch=0.0)


def _apply_interrogative_upspeak(
    accent_phrases: list[AccentPhrase], enable_interrogative_upspeak: bool
) -> list[AccentPhrase]:
    """必要に応じて各アクセント句の末尾へ疑問形モーラ（同一母音・継続長 0.15秒・音高↑）を付与する"""
    if not enable_interrogative_upspeak:
        return accent_phrases

    for accent_phrase in accent_phrases:
        moras = accent_phrase.moras
        if len(moras) == 0:
            continue
        # 疑問形補正条件: 疑問形アクセント句 & 末尾有声モーラ
        last_mora = moras[-1]
        if accent_phrase.is_interrogative and last_mora.pitch > 0:
            upspeak_mora = Mora(
                text=mora_phonemes_to_mora_kana[last_mora.vowel],
                consonant=None,
                consonant_length=None,
                vowel=last_mora.vowel,
                vowel_length=UPSPEAK_LENGTH,
                pitch=min(last_mora.pitch + UPSPEAK_PITCH_ADD, UPSPEAK_PITCH_MAX),
            )
            accent_phrase.moras += [upspeak_mora]
    return accent_phrases


def _apply_prepost_silence(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ前後無音（`prePhonemeLength` & `postPhonemeLength`）を付加する"""
    pre_silence_moras = [_generate_silence_mora(query.pre_phoneme_length)]
    post_silence_moras = [_generate_silence_mora(query.post_phoneme_length)]
    return pre_silence_moras + moras + post_silence_moras


def _apply_pause_length(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ無音時間（`pauseLength`）を適用する"""
    if query.pause_length is not None:
        for mora in moras:
            if mora.vowel == "pau":
                mora.vowel_length = query.pause_length
    return moras


def _apply_pause_length_scale(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ無音時間スケール（`pauseLengthScale`）を適用する"""
    for mora in moras:
        if mora.vowel == "pau":
            mora.vowel_length *= query.pause_length_scale
    return moras


def _apply_speed_scale(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ話速スケール（`speedScale`）を適用する"""
    for mora in moras:
        mora.vowel_length /= query.speed_scale
        if mora.consonant_length:
            mora.consonant_length /= query.speed_scale
    return moras


def _apply_pitch_scale(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ音高スケール（`pitchScale`）を適用する"""
    for mora in moras:
        mora.pitch *= 2**query.pitch_scale
    return moras


def _apply_intonation_scale(moras: list[Mora], query: AudioQuery) -> list[Mora]:
    """モーラ系列へ音声合成用のクエリがもつ抑揚スケール（`intonationScale`）を適用する"""
    # 有声音素 (f0>0) の平均値に対する乖離度をスケール
    voiced = [mora for mora in moras if mora.pitch > 0]
    if len(voiced) == 0:
        return moras
    mean_f0 = float(np.mean([mora.pitch for mora in voiced]))
    for mora in voiced:
        mora.pitch = (mora.pitch - mean_f0) * query.intonation_scale + mean_f0
    return moras


def _to_frame(sec: float) -> int:
    # NOTE: `np.round` は偶数丸め
    sec_rounded: NDArray[np.float64] = np.round(sec * FRAMERATE)
    return sec_rounded.astype(np.int32).item()


def _count_frame_per_unit(
    moras: list[Mora],
) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """
    音素あたり・モーラあたりのフレーム長を算出する

    Returns
    -------
    frame_per_phoneme : NDArray[np.int64]
        音素あたりのフレーム長。端数丸め。shape = (Phoneme,)
    frame_per_mora : NDArray[np.int64]
        モーラあたりのフレーム長。音素ごとのフレーム長の和。shape = (Mora,)
    """
    frame_per_phoneme: list[int] = []
    frame_per_mora: list[int] = []
    for mora in moras:
        vowel_frames = _to_frame(mora.vowel_length)
        consonant_frames = (
            _to_frame(mora.consonant_length) if mora.consonant_length is not None else 0
        )
        if mora.consonant:
            frame_per_phoneme += [consonant_frames]
        frame_per_phoneme += [vowel_frames]
        frame_per_mora += [vowel_frames + consonant_frames]

    return (
        np.array(frame_per_phoneme, dtype=np.int64),
        np.array(frame_per_mora, dtype=np.int64),
    )


def _query_to_decoder_feature(
    query: AudioQuery,
) -> tuple[NDArray[np.float32], NDArray[np.float32]]:
    """音声合成用のクエリからフレームごとの音素 (shape=(フレーム長, 音素数)) と音高 (shape=(フレーム長,)) を得る"""
    moras = to_flatten_moras(query.accent_phrases)

    # 設定を適用する
    moras = _apply_prepost_silence(moras, query)
    moras = _apply_pause_length(moras, query)
    moras = _apply_pause_length_scale(moras, query)
    moras = _apply_speed_scale(moras, query)
    moras = _apply_pitch_scale(moras, query)
    moras = _apply_intonation_scale(moras, query)

    # 表現を変更する（音素クラス → 音素 onehot ベクトル、モーラクラス → 音高スカラ）
    phoneme = np.stack([p.onehot for p in _to_flatten_phonemes(moras)])
    f0 = np.array([mora.pitch for mora in moras], dtype=np.float32)

    # 時間スケールを変更する（音素・モーラ → フレーム）
    frame_per_phoneme, frame_per_mora = _count_frame_per_unit(moras)
    phoneme = np.repeat(phoneme, frame_per_phoneme, axis=0)
    f0 = np.repeat(f0, frame_per_mora)

    return phoneme, f0


def _pad_silence(
    phoneme: NDArray[np.float32], f0: NDArray[np.float32], padding_frame_length: int
) -> tuple[NDArray[np.float32], NDArray[np.float32]]:
    """フレーム系列の前後へ無音 (pau・音高 0) のフレームを付加する。"""
    pau = np.tile(Phoneme("pau").onehot, (padding_frame_length, 1))
    silence_f0 = np.zeros(padding_frame_length, dtype=np.float32)
    return (
        np.concatenate([pau, phoneme, pau]).astype(np.float32),
        np.concatenate([silence_f0, f0, silence_f0]).astype(np.float32),
    )


class Synthesizer:
    """
    音声合成器

    音声モデルの読み込み・解放と、テキストから音声波形までの各段階の処理を提供する。
    各段階は開始時にスタイルIDを解決する。途中で音声モデルが解放された場合、以降の段階が失敗する。
    """

    def __init__(
        self,
        runtime: InferenceRuntime,
        text_analyzer: TextAnalyzer,
        options: InitializeOptions | None = None,
    ) -> None:
        """
        Parameters
        ----------
        runtime : InferenceRuntime
            推論ランタイム
        text_analyzer : TextAnalyzer
            テキスト解析器。通常は `OpenJtalk`
        options : InitializeOptions | None
            初期化オプション。None の場合は既定値
        """
        if options is None:
            options = InitializeOptions()
        if options.cpu_num_threads < 0:
            raise ValueError("cpu_num_threads は 0 以上でなければなりません")
        self._runtime = runtime
        self._text_analyzer = text_analyzer
        self._device = select_device(
            options.acceleration_mode, runtime.supported_devices()
        )
        self._cpu_num_threads = options.cpu_num_threads
        self._registry = ModelRegistry()

    @property
    def is_gpu_mode(self) -> bool:
        """GPU で推論するか否か"""
        return self._device != "cpu"

    @property
    def default_sampling_rate(self) -> int:
        """音声波形生成モデルが出力する音声波形のサンプリングレート"""
        return self._runtime.default_sampling_rate

    @property
    def supported_devices(self) -> DeviceSupport:
        """推論ランタイムで各デバイスが利用可能か否かの一覧"""
        return self._runtime.supported_devices()

    def load_voice_model(self, model: VoiceModel) -> None:
        """
        音声モデルを読み込む。

        推論セッションの生成はロック外で行う。生成中に競合が生じた場合、生成したセッションは破棄される。
        """
        self._registry.ensure_insertable(model)
        sessions = self._runtime.new_sessions(
            model, self._device, self._cpu_num_threads
        )
        adapter = InferenceAdapter(sessions, self._runtime.default_sampling_rate)
        self._registry.insert(model, adapter)

    def unload_voice_model(self, model_id: VoiceModelId) -> None:
        """音声モデルを解放する。提供していたスタイルは全て使えなくなる。"""
        self._registry.remove(model_id)

    def is_loaded_voice_model(self, model_id: VoiceModelId) -> bool:
        return self._registry.is_loaded(model_id)

    def metas(self) -> list[SpeakerMeta]:
        """読み込み済みの音声モデルのキャラクター情報"""
        return self._registry.metas()

    def create_accent_phrases(self, text: str, style_id: StyleId) -> list[AccentPhrase]:
        """テキストからアクセント句系列（音素長・モーラ音高 0 初期化）を生成する"""
        self._registry.resolve(style_id)
        labels = self._text_analyzer.extract_full_context_label(text)
        return full_context_labels_to_accent_phrases(labels)

    def create_accent_phrases_from_kana(
        self, kana: str, style_id: StyleId
    ) -> list[AccentPhrase]:
        """AquesTalk 風記法テキストからアクセント句系列（音素長・モーラ音高 0 初期化）を生成する"""
        self._registry.resolve(style_id)
        return parse_kana(kana)

    def replace_phoneme_length(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        """アクセント句系列に含まれる音素の長さをスタイルに合わせて更新した、新しいアクセント句系列を返す。"""
        loaded, inner_voice_id = self._registry.get(style_id)
        accent_phrases = copy.deepcopy(accent_phrases)

        moras = to_flatten_moras(accent_phrases)
        if len(moras) == 0:
            return accent_phrases
        phonemes = _to_flatten_phonemes(moras)
        phoneme_ids = np.array([p.id for p in phonemes], dtype=np.int64)

        phoneme_lengths = loaded.adapter.predict_duration(phoneme_ids, inner_voice_id)

        # 生成された音素長でモーラの音素長を更新する
        vowel_indexes = [i for i, p in enumerate(phonemes) if p.is_mora_tail()]
        for i, mora in enumerate(moras):
            if mora.consonant is None:
                mora.consonant_length = None
            else:
                mora.consonant_length = float(phoneme_lengths[vowel_indexes[i] - 1])
            mora.vowel_length = float(phoneme_lengths[vowel_indexes[i]])

        return accent_phrases

    def replace_mora_pitch(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        """アクセント句系列に含まれるモーラの音高をスタイルに合わせて更新した、新しいアクセント句系列を返す。"""
        loaded, inner_voice_id = self._registry.get(style_id)
        accent_phrases = copy.deepcopy(accent_phrases)

        # 後続の numpy.concatenate が空リストだとエラーになるので別処理
        if len(accent_phrases) == 0:
            return accent_phrases

        # アクセントの開始/終了位置リストを作る。accent は 1 始まり。
        # accent が 1 の場合は先頭モーラで開始し、それ以外は 2 番目のモーラで開始する。
        start_accent_list = np.concatenate(
            [
                _create_one_hot(phrase, 0 if phrase.accent == 1 else 1)
                for phrase in accent_phrases
            ]
        )
        end_accent_list = np.concatenate(
            [_create_one_hot(phrase, phrase.accent - 1) for phrase in accent_phrases]
        )

        # アクセント句の開始/終了位置リストを作る
        start_accent_phrase_list = np.concatenate(
            [_create_one_hot(phrase, 0) for phrase in accent_phrases]
        )
        end_accent_phrase_list = np.concatenate(
            [_create_one_hot(phrase, -1) for phrase in accent_phrases]
        )

        # モーラ系列から子音ID系列・母音ID系列を抽出する
        moras = to_flatten_moras(accent_phrases)
        consonant_ids = np.array(
            [Phoneme(mora.consonant).id if mora.consonant else -1 for mora in moras],
            dtype=np.int64,
        )
        vowels = [Phoneme(mora.vowel) for mora in moras]
        vowel_ids = np.array([p.id for p in vowels], dtype=np.int64)

        f0 = loaded.adapter.predict_intonation(
            vowel_ids,
            consonant_ids,
            start_accent_list,
            end_accent_list,
            start_accent_phrase_list,
            end_accent_phrase_list,
            inner_voice_id,
        )

        # 母音が無声であるモーラは音高を 0 とする
        for i, (mora, vowel) in enumerate(zip(moras, vowels)):
            mora.pitch = 0.0 if vowel.is_unvoiced_mora_tail() else float(f0[i])

        return accent_phrases

    def replace_mora_data(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        """アクセント句系列に含まれる音素の長さとモーラの音高をスタイルに合わせて更新した、新しいアクセント句系列を返す。"""
        accent_phrases = self.replace_phoneme_length(accent_phrases, style_id)
        return self.replace_mora_pitch(accent_phrases, style_id)

    def audio_query(self, text: str, style_id: StyleId) -> AudioQuery:
        """テキストから音声合成用のクエリを生成する"""
        accent_phrases = self.create_accent_phrases(text, style_id)
        accent_phrases = self.replace_mora_data(accent_phrases, style_id)
        return AudioQuery.from_accent_phrases(
            accent_phrases, kana=create_kana(accent_phrases)
        )

    def audio_query_from_kana(self, kana: str, style_id: StyleId) -> AudioQuery:
        """AquesTalk 風記法テキストから音声合成用のクエリを生成する"""
        accent_phrases = self.create_accent_phrases_from_kana(kana, style_id)
        accent_phrases = self.replace_mora_data(accent_phrases, style_id)
        return AudioQuery.from_accent_phrases(accent_phrases, kana=kana)

    def synthesis(
        self,
        query: AudioQuery,
        style_id: StyleId,
        options: SynthesisOptions | None = None,
    ) -> SynthesisResult:
        """音声合成用のクエリとスタイルIDから音声波形を生成する"""
        if options is None:
            options = SynthesisOptions()
        if options.padding_frame_length < 0:
            raise ValueError("padding_frame_length は 0 以上でなければなりません")
        loaded, inner_voice_id = self._registry.get(style_id)

        # 同一のクエリで複数回呼ばれる可能性があるので、元のクエリに破壊的変更を行わない
        query = query.model_copy(deep=True)
        query.accent_phrases = _apply_interrogative_upspeak(
            query.accent_phrases, options.enable_interrogative_upspeak
        )

        phoneme, f0 = _query_to_decoder_feature(query)
        padding = options.padding_frame_length
        phoneme, f0 = _pad_silence(phoneme, f0, padding)
        raw_wave = loaded.adapter.decode(phoneme, f0, inner_voice_id)
        # 付加した無音フレームに相当するサンプルを取り除く
        trim = padding * _SAMPLES_PER_FRAME
        raw_wave = raw_wave[trim : len(raw_wave) - trim]

        wave = raw_wave_to_output_wave(query, raw_wave, loaded.adapter.sampling_rate)
        wav = to_wav_bytes(wave, query.output_sampling_rate)
        features = (
            DecoderFeature(phoneme=phoneme, f0=f0, padding_frame_length=padding)
            if options.return_features
            else None
        )
        return SynthesisResult(wav=wav, features=features)

    def tts(
        self, text: str, style_id: StyleId, options: SynthesisOptions | None = None
    ) -> SynthesisResult:
        """テキストから音声波形を生成する"""
        query = self.audio_query(text, style_id)
        return self.synthesis(query, style_id, options)

    def tts_from_kana(
        self, kana: str, style_id: StyleId, options: SynthesisOptions | None = None
    ) -> SynthesisResult:
        """AquesTalk 風記法テキストから音声波形を生成する"""
        query = self.audio_query_from_kana(kana, style_id)
        return self.synthesis(query, style_id, options)
