from .model_registry import LoadedVoiceModel, ModelRegistry
from .onnx_runtime import OnnxRuntime
from .runtime import (
    AccelerationMode,
    DeviceSupport,
    InferenceRuntime,
    InferenceSessionSet,
    InitializeOptions,
    parse_acceleration_mode,
)

__all__ = [
    "AccelerationMode",
    "DeviceSupport",
    "InferenceRuntime",
    "InferenceSessionSet",
    "InitializeOptions",
    "LoadedVoiceModel",
    "ModelRegistry",
    "OnnxRuntime",
    "parse_acceleration_mode",
]
