"""
音声モデル

音声モデルファイル (VVM) は以下のエントリを含む ZIP アーカイブである。

- `manifest.json`: 音声モデルの ID と、他のエントリのファイル名
- キャラクター情報 (`metas_filename`): キャラクター情報のリストを表す JSON
- 推論モデルの重み (`predict_duration_filename` ほか): 音素長・音高・音声波形を推論するモデル
"""

import zipfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .error import (
    InvalidModelDataError,
    OpenZipFileError,
    ReadZipEntryError,
)
from .metas.metas import SpeakerMeta, StyleId, VoiceModelId

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため

_MANIFEST_FILENAME = "manifest.json"

_T = TypeVar("_T")


class VvmManifest(BaseModel):
    """音声モデルファイルのマニフェスト"""

    model_config = ConfigDict(frozen=True)

    manifest_version: str = Field(description="マニフェストの形式のバージョン")
    id: VoiceModelId = Field(description="音声モデルID")
    metas_filename: str = Field(description="キャラクター情報のファイル名")
    predict_duration_filename: str = Field(description="音素長推論モデルのファイル名")
    predict_intonation_filename: str = Field(description="音高推論モデルのファイル名")
    decode_filename: str = Field(description="音声波形生成モデルのファイル名")
    style_id_to_inner_voice_id: dict[StyleId, int] = Field(
        default_factory=dict,
        description="スタイルIDから推論モデル内の話者IDへの対応。無いスタイルはスタイルIDをそのまま使う",
    )


_metas_adapter = TypeAdapter(list[SpeakerMeta])


@dataclass(frozen=True)
class ModelWeights:
    """推論モデルの重み。中身は推論ランタイムに依存する。"""

    predict_duration: bytes
    predict_intonation: bytes
    decode: bytes


class VoiceModel:
    """
    音声モデル

    `VoiceModel.from_path` でのみ生成され、生成後は変更されない。
    """

    def __init__(
        self,
        manifest: VvmManifest,
        metas: list[SpeakerMeta],
        weights: ModelWeights,
        path: Path | None = None,
    ) -> None:
        self._manifest = manifest
        self._metas = tuple(metas)
        self._weights = weights
        self._path = path
        self._inner_voice_ids = MappingProxyType(
            {
                style.id: manifest.style_id_to_inner_voice_id.get(style.id, style.id)
                for speaker in metas
                for style in speaker.styles
            }
        )

    def __repr__(self) -> str:
        return f"VoiceModel(id={self.id!r}, path={self._path!r})"

    @property
    def id(self) -> VoiceModelId:
        """音声モデルID"""
        return self._manifest.id

    @property
    def metas(self) -> list[SpeakerMeta]:
        """キャラクター情報"""
        return list(self._metas)

    @property
    def manifest(self) -> VvmManifest:
        return self._manifest

    @property
    def weights(self) -> ModelWeights:
        return self._weights

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def style_ids(self) -> list[StyleId]:
        """この音声モデルが提供するスタイルIDの一覧"""
        return list(self._inner_voice_ids.keys())

    @property
    def style_id_to_inner_voice_id(self) -> Mapping[StyleId, int]:
        return self._inner_voice_ids

    @classmethod
    def from_path(cls, path: str | Path) -> "VoiceModel":
        """
        音声モデルファイルを読み込む。

        Raises
        ------
        OpenZipFileError
            ファイルを読めない、あるいは ZIP ではない
        ReadZipEntryError
            マニフェストに記載されたエントリが無い
        InvalidModelDataError
            マニフェストやキャラクター情報が不正
        """
        path = Path(path)
        try:
            archive = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as e:
            raise OpenZipFileError(
                f"{path} をZIPファイルとして開くことができませんでした: {e}",
                path=str(path),
            ) from e

        with archive:
            manifest = _parse(
                VvmManifest.model_validate_json,
                _read_entry(archive, path, _MANIFEST_FILENAME),
                path,
                _MANIFEST_FILENAME,
            )
            metas = _parse(
                _metas_adapter.validate_json,
                _read_entry(archive, path, manifest.metas_filename),
                path,
                manifest.metas_filename,
            )
            _validate_styles(manifest, metas, path)
            weights = ModelWeights(
                predict_duration=_read_entry(
                    archive, path, manifest.predict_duration_filename
                ),
                predict_intonation=_read_entry(
                    archive, path, manifest.predict_intonation_filename
                ),
                decode=_read_entry(archive, path, manifest.decode_filename),
            )

        logger.info(f"Opened voice model: {path} (id={manifest.id})")
        return cls(manifest, metas, weights, path=path)


def _read_entry(archive: zipfile.ZipFile, path: Path, name: str) -> bytes:
    try:
        return archive.read(name)
    except (KeyError, OSError, zipfile.BadZipFile) as e:
        raise ReadZipEntryError(
            f"{path} の {name} を読み込むことができませんでした: {e}",
            path=str(path),
            entry=name,
        ) from e


def _parse(parser: Callable[[bytes], _T], data: bytes, path: Path, name: str) -> _T:
    try:
        return parser(data)
    except ValidationError as e:
        raise InvalidModelDataError(
            f"{path} の {name} の内容が不正です: {e}", path=str(path), entry=name
        ) from e


def _validate_styles(
    manifest: VvmManifest, metas: list[SpeakerMeta], path: Path
) -> None:
    style_ids = [style.id for speaker in metas for style in speaker.styles]
    if len(style_ids) == 0:
        raise InvalidModelDataError(
            f"{path} にはスタイルが含まれていません", path=str(path)
        )
    if len(set(style_ids)) != len(style_ids):
        raise InvalidModelDataError(
            f"{path} のスタイルIDが重複しています: {style_ids}", path=str(path)
        )
    unknown = set(manifest.style_id_to_inner_voice_id) - set(style_ids)
    if unknown:
        raise InvalidModelDataError(
            f"{path} のマニフェストに存在しないスタイルIDが含まれています: {sorted(unknown)}",
            path=str(path),
        )
