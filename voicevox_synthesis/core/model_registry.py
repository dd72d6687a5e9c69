"""読み込み済み音声モデルの管理"""

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType

from ..error import (
    ModelAlreadyLoadedError,
    ModelNotFoundError,
    StyleAlreadyLoadedError,
    StyleNotFoundError,
)
from ..metas.metas import SpeakerMeta, StyleId, VoiceModelId, merge_speaker_metas
from ..voice_model import VoiceModel
from .inference_adapter import InferenceAdapter

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため


@dataclass(frozen=True)
class LoadedVoiceModel:
    """推論セッションを生成済みの音声モデル"""

    model: VoiceModel
    adapter: InferenceAdapter

    def inner_voice_id(self, style_id: StyleId) -> int:
        return self.model.style_id_to_inner_voice_id[style_id]


@dataclass(frozen=True)
class _RegistryState:
    """ある時点の登録状態。生成後は変更しない。"""

    models: Mapping[VoiceModelId, LoadedVoiceModel]
    style_routes: Mapping[StyleId, VoiceModelId]


_EMPTY_STATE = _RegistryState(MappingProxyType({}), MappingProxyType({}))


class ModelRegistry:
    """
    読み込み済み音声モデルと、スタイルIDから音声モデルIDへの対応の管理

    状態は不変な `_RegistryState` として保持し、更新時は新しい状態を作って 1 回の代入で差し替える。
    読み出しはロックを取らずに現在の状態を参照する。更新同士はロックで直列化する。
    """

    def __init__(self) -> None:
        self._state = _EMPTY_STATE
        self._write_lock = threading.Lock()

    def _check_insertable(self, state: _RegistryState, model: VoiceModel) -> None:
        if model.id in state.models:
            raise ModelAlreadyLoadedError(model.id)
        for style_id in model.style_ids:
            if style_id in state.style_routes:
                raise StyleAlreadyLoadedError(style_id, state.style_routes[style_id])

    def ensure_insertable(self, model: VoiceModel) -> None:
        """現在の状態に対して音声モデルを追加できるか検証する。状態は変更しない。"""
        self._check_insertable(self._state, model)

    def insert(self, model: VoiceModel, adapter: InferenceAdapter) -> None:
        """
        音声モデルを追加する。全てのスタイルを追加できない場合は何も追加しない。

        Raises
        ------
        ModelAlreadyLoadedError
            同じ音声モデルIDが既に読み込まれている
        StyleAlreadyLoadedError
            いずれかのスタイルIDが他の音声モデルにより既に読み込まれている
        """
        with self._write_lock:
            state = self._state
            self._check_insertable(state, model)
            models = dict(state.models)
            models[model.id] = LoadedVoiceModel(model, adapter)
            routes = dict(state.style_routes)
            for style_id in model.style_ids:
                routes[style_id] = model.id
            self._state = _RegistryState(
                MappingProxyType(models), MappingProxyType(routes)
            )
        logger.info(f"Loaded voice model: {model.id} (styles={model.style_ids})")

    def remove(self, model_id: VoiceModelId) -> VoiceModel:
        """
        音声モデルと、その音声モデルが提供するスタイルを全て取り除く。

        Raises
        ------
        ModelNotFoundError
            音声モデルが読み込まれていない
        """
        with self._write_lock:
            state = self._state
            if model_id not in state.models:
                raise ModelNotFoundError(model_id)
            models = dict(state.models)
            removed = models.pop(model_id)
            routes = {
                style_id: owner
                for style_id, owner in state.style_routes.items()
                if owner != model_id
            }
            self._state = _RegistryState(
                MappingProxyType(models), MappingProxyType(routes)
            )
        logger.info(f"Unloaded voice model: {model_id}")
        return removed.model

    def resolve(self, style_id: StyleId) -> VoiceModelId:
        """スタイルIDを提供する音声モデルのIDを取得する。"""
        routes = self._state.style_routes
        if style_id not in routes:
            raise StyleNotFoundError(style_id)
        return routes[style_id]

    def get(self, style_id: StyleId) -> tuple[LoadedVoiceModel, int]:
        """スタイルIDを提供する音声モデルと、推論モデル内の話者IDを取得する。"""
        # NOTE: 1 つの状態から両方を読み出すため、途中で差し替わっても整合する
        state = self._state
        if style_id not in state.style_routes:
            raise StyleNotFoundError(style_id)
        loaded = state.models[state.style_routes[style_id]]
        return loaded, loaded.inner_voice_id(style_id)

    def is_loaded(self, model_id: VoiceModelId) -> bool:
        return model_id in self._state.models

    def model_ids(self) -> list[VoiceModelId]:
        return list(self._state.models.keys())

    def metas(self) -> list[SpeakerMeta]:
        """読み込み済みの全音声モデルのキャラクター情報を統合して取得する。"""
        state = self._state
        return merge_speaker_metas(
            [meta for loaded in state.models.values() for meta in loaded.model.metas]
        )
