"""推論セッションのアダプターのテスト"""

from unittest.mock import MagicMock

import numpy as np
import pytest

from voicevox_synthesis.core.inference_adapter import InferenceAdapter
from voicevox_synthesis.dev.core.mock import MockSessionSet
from voicevox_synthesis.error import RunModelError
from voicevox_synthesis.tts_pipeline.phoneme import NUM_PHONEME


def test_predict_duration() -> None:
    """前後無音を付加して推論し、その部分を取り除いた結果を返す。"""
    sessions = MockSessionSet()
    sessions.predict_duration = MagicMock(wraps=sessions.predict_duration)  # type: ignore[method-assign]
    adapter = InferenceAdapter(sessions, 24000)

    result = adapter.predict_duration(np.array([19, 21], dtype=np.int64), 2)

    phoneme_list, speaker_id = sessions.predict_duration.call_args.args
    assert phoneme_list.tolist() == [0, 19, 21, 0]
    assert phoneme_list.dtype == np.int64
    assert speaker_id.tolist() == [2]
    assert result.shape == (2,)


def test_predict_intonation() -> None:
    """子音無しを -1 で表す前後無音を付加して推論する。"""
    sessions = MockSessionSet()
    sessions.predict_intonation = MagicMock(wraps=sessions.predict_intonation)  # type: ignore[method-assign]
    adapter = InferenceAdapter(sessions, 24000)
    ones = np.array([1], dtype=np.int64)

    result = adapter.predict_intonation(
        np.array([21], dtype=np.int64),
        np.array([19], dtype=np.int64),
        ones,
        ones,
        ones,
        ones,
        0,
    )

    args = sessions.predict_intonation.call_args.args
    assert args[0] == 3
    assert args[1].tolist() == [0, 21, 0]
    assert args[2].tolist() == [-1, 19, -1]
    assert all(arg.tolist() == [0, 1, 0] for arg in args[3:7])
    assert result.shape == (1,)
    assert result[0] == pytest.approx((21 + 19 + 4) * 0.0625)


def test_decode() -> None:
    """音高は (フレーム長, 1) の形で渡される。"""
    sessions = MockSessionSet()
    sessions.decode = MagicMock(wraps=sessions.decode)  # type: ignore[method-assign]
    adapter = InferenceAdapter(sessions, 24000)
    phoneme = np.zeros((4, NUM_PHONEME), dtype=np.float32)
    phoneme[:, 0] = 1
    f0 = np.zeros(4, dtype=np.float32)

    wave = adapter.decode(phoneme, f0, 0)

    f0_arg, phoneme_arg, _ = sessions.decode.call_args.args
    assert f0_arg.shape == (4, 1)
    assert phoneme_arg.shape == (4, NUM_PHONEME)
    assert wave.shape == (4 * 256,)


def test_run_model_error() -> None:
    """推論セッションの失敗は `RunModelError` となる。"""
    sessions = MockSessionSet()
    sessions.predict_duration = MagicMock(side_effect=RuntimeError("broken"))  # type: ignore[method-assign]
    adapter = InferenceAdapter(sessions, 24000)

    with pytest.raises(RunModelError) as e:
        adapter.predict_duration(np.array([0], dtype=np.int64), 0)
    assert "broken" in e.value.message
