"""Audio streaming proxy for Podsite."""

from podsite.audio.proxy import AudioProxy, ProxiedAudio, build_target_url

__all__ = [
    "AudioProxy",
    "ProxiedAudio",
    "build_target_url",
]
