"""音声合成機能を提供する API Router"""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from voicevox_synthesis.app.global_exceptions import ParseKanaBadRequest
from voicevox_synthesis.metas.metas import StyleId
from voicevox_synthesis.model import AudioQuery
from voicevox_synthesis.tts_pipeline.model import AccentPhrase
from voicevox_synthesis.tts_pipeline.synthesizer import SynthesisOptions, Synthesizer

_WAV_RESPONSES: dict[int | str, dict[str, object]] = {
    200: {
        "content": {"audio/wav": {"schema": {"type": "string", "format": "binary"}}},
    }
}

_PARSE_KANA_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {
        "description": "読み仮名のパースに失敗",
        "model": ParseKanaBadRequest,
    }
}


def generate_tts_pipeline_router(synthesizer: Synthesizer) -> APIRouter:
    """音声合成 API Router を生成する"""
    router = APIRouter()

    @router.post(
        "/audio_query",
        tags=["クエリ作成"],
        summary="音声合成用のクエリを作成する",
        responses=_PARSE_KANA_RESPONSES,
    )
    def audio_query(
        text: str,
        style_id: Annotated[StyleId, Query(alias="speaker")],
        is_kana: bool = False,
    ) -> AudioQuery:
        """
        音声合成用のクエリの初期値を得ます。ここで得られたクエリはそのまま音声合成に利用できます。各値の意味は`Schemas`を参照してください。

        is_kanaが`true`のとき、テキストはAquesTalk 風記法で解釈されます。
        """
        if is_kana:
            return synthesizer.audio_query_from_kana(text, style_id)
        return synthesizer.audio_query(text, style_id)

    @router.post(
        "/accent_phrases",
        tags=["クエリ編集"],
        summary="テキストからアクセント句を得る",
        responses=_PARSE_KANA_RESPONSES,
    )
    def accent_phrases(
        text: str,
        style_id: Annotated[StyleId, Query(alias="speaker")],
        is_kana: bool = False,
    ) -> list[AccentPhrase]:
        """
        テキストからアクセント句を得ます。

        is_kanaが`true`のとき、テキストは次のAquesTalk 風記法で解釈されます。デフォルトは`false`です。
        * 全てのカナはカタカナで記述される
        * アクセント句は`/`または`、`で区切る。`、`で区切った場合に限り無音区間が挿入される。
        * カナの手前に`_`を入れるとそのカナは無声化される
        * アクセント位置を`'`で指定する。全てのアクセント句にはアクセント位置を1つ指定する必要がある。
        * アクセント句末に`？`(全角)を入れることにより疑問文の発音ができる。
        """
        if is_kana:
            phrases = synthesizer.create_accent_phrases_from_kana(text, style_id)
        else:
            phrases = synthesizer.create_accent_phrases(text, style_id)
        return synthesizer.replace_mora_data(phrases, style_id)

    @router.post(
        "/mora_data",
        tags=["クエリ編集"],
        summary="アクセント句から音素の長さと音高を得る",
    )
    def mora_data(
        accent_phrases: list[AccentPhrase],
        style_id: Annotated[StyleId, Query(alias="speaker")],
    ) -> list[AccentPhrase]:
        return synthesizer.replace_mora_data(accent_phrases, style_id)

    @router.post(
        "/mora_length",
        tags=["クエリ編集"],
        summary="アクセント句から音素の長さを得る",
    )
    def mora_length(
        accent_phrases: list[AccentPhrase],
        style_id: Annotated[StyleId, Query(alias="speaker")],
    ) -> list[AccentPhrase]:
        return synthesizer.replace_phoneme_length(accent_phrases, style_id)

    @router.post(
        "/mora_pitch",
        tags=["クエリ編集"],
        summary="アクセント句から音高を得る",
    )
    def mora_pitch(
        accent_phrases: list[AccentPhrase],
        style_id: Annotated[StyleId, Query(alias="speaker")],
    ) -> list[AccentPhrase]:
        return synthesizer.replace_mora_pitch(accent_phrases, style_id)

    @router.post(
        "/synthesis",
        response_class=Response,
        responses=_WAV_RESPONSES,
        tags=["音声合成"],
        summary="音声合成する",
    )
    def synthesis(
        query: AudioQuery,
        style_id: Annotated[StyleId, Query(alias="speaker")],
        enable_interrogative_upspeak: Annotated[
            bool,
            Query(
                description="疑問系のテキストが与えられたら語尾を自動調整する",
            ),
        ] = True,
    ) -> Response:
        result = synthesizer.synthesis(
            query,
            style_id,
            SynthesisOptions(enable_interrogative_upspeak=enable_interrogative_upspeak),
        )
        return Response(content=result.wav, media_type="audio/wav")

    @router.post(
        "/tts",
        response_class=Response,
        responses={**_WAV_RESPONSES, **_PARSE_KANA_RESPONSES},
        tags=["音声合成"],
        summary="テキストから直接音声合成する",
    )
    def tts(
        text: str,
        style_id: Annotated[StyleId, Query(alias="speaker")],
        is_kana: bool = False,
        enable_interrogative_upspeak: Annotated[
            bool,
            Query(
                description="疑問系のテキストが与えられたら語尾を自動調整する",
            ),
        ] = True,
    ) -> Response:
        """既定のクエリで音声合成します。is_kanaが`true`のとき、テキストはAquesTalk 風記法で解釈されます。"""
        options = SynthesisOptions(
            enable_interrogative_upspeak=enable_interrogative_upspeak
        )
        if is_kana:
            result = synthesizer.tts_from_kana(text, style_id, options)
        else:
            result = synthesizer.tts(text, style_id, options)
        return Response(content=result.wav, media_type="audio/wav")

    return router
