from .metas import SpeakerMeta, StyleId, StyleMeta, VoiceModelId

__all__ = [
    "SpeakerMeta",
    "StyleId",
    "StyleMeta",
    "VoiceModelId",
]
