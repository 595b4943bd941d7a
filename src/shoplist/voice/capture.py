"""Microphone recording."""
import io
import queue
import wave
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import numpy as np

from shoplist.ai.errors import PermissionDenied, RecordingError
from shoplist.config.settings import get_settings
from shoplist.domain.types import AudioBlob
from shoplist.utils.logger import get_logger


def default_stream_factory(**kwargs) -> Any:
    """Open a sounddevice input stream."""
    import sounddevice as sd

    try:
        sd.query_devices(kind='input')
    except (sd.PortAudioError, ValueError) as e:
        raise PermissionDenied(
            "No microphone is available",
            suggestions=["Allow microphone access", "Connect a microphone"]
        ) from e
    try:
        return sd.InputStream(**kwargs)
    except sd.PortAudioError as e:
        raise RecordingError("Failed to start recording", suggestions=["Try again"]) from e


@dataclass
class RecordingHandle:
    """An in-progress recording. Single use."""
    stream: Any
    sample_rate: int
    channels: int
    chunks: "queue.Queue[np.ndarray]" = field(default_factory=queue.Queue)
    stopped: bool = False


class VoiceCapture:
    """Records 16-bit WAV audio from the default input device."""

    def __init__(
        self,
        stream_factory: Callable[..., Any] = default_stream_factory,
        permission_granted: Optional[bool] = None
    ):
        settings = get_settings()
        self.stream_factory = stream_factory
        self.permission_granted = (
            settings.MICROPHONE_ENABLED if permission_granted is None else permission_granted
        )
        self.sample_rate = settings.SAMPLE_RATE
        self.channels = settings.CHANNELS
        self.logger = get_logger(self.__class__.__name__)

    def start(self) -> RecordingHandle:
        """
        Start recording.

        Raises:
            PermissionDenied: If microphone access was not granted
            RecordingError: If the capture device cannot be opened
        """
        if not self.permission_granted:
            raise PermissionDenied(
                "Microphone permission was not granted",
                suggestions=["Allow microphone access in settings"]
            )

        chunks: "queue.Queue[np.ndarray]" = queue.Queue()

        def callback(indata, frames, time_, status):
            if status:
                self.logger.warning("Input stream status", status=str(status))
            chunks.put(indata.copy())

        try:
            stream = self.stream_factory(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype='int16',
                callback=callback,
            )
            stream.start()
        except (PermissionDenied, RecordingError):
            raise
        except Exception as e:
            self.logger.exception("Failed to start recording")
            raise RecordingError("Failed to start recording", suggestions=["Try again"]) from e

        self.logger.info("Recording started", sample_rate=self.sample_rate)
        return RecordingHandle(
            stream=stream,
            sample_rate=self.sample_rate,
            channels=self.channels,
            chunks=chunks,
        )

    def stop(self, handle: RecordingHandle) -> AudioBlob:
        """
        Stop a recording and return it as WAV audio.

        Raises:
            RecordingError: If the handle was already stopped or nothing was captured
        """
        if handle.stopped:
            raise RecordingError("Recording was already stopped")
        handle.stopped = True
        try:
            handle.stream.stop()
            handle.stream.close()
        except Exception as e:
            self.logger.exception("Failed to stop recording")
            raise RecordingError("Failed to stop recording") from e

        frames: List[np.ndarray] = []
        while not handle.chunks.empty():
            frames.append(handle.chunks.get_nowait())
        if not frames:
            raise RecordingError("No audio was captured", suggestions=["Hold the button while speaking"])

        audio = encode_wav(np.concatenate(frames), handle.sample_rate, handle.channels)
        self.logger.info("Recording stopped", size=len(audio.data))
        return audio


def encode_wav(samples: np.ndarray, sample_rate: int, channels: int) -> AudioBlob:
    """Pack int16 samples into a WAV blob."""
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(samples.astype(np.int16).tobytes())
    return AudioBlob(data=buffer.getvalue(), mime_type="audio/wav")
