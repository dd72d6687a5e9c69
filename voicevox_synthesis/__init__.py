"""テキストから日本語音声を合成する音声合成エンジン"""

__version__ = "0.1.0"
