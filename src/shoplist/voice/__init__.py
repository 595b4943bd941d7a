"""Voice capture for shoplist.

The Streamlit view records through ``st.audio_input``; ``VoiceCapture`` serves
hosts that own the microphone themselves.
"""
from .capture import RecordingHandle, VoiceCapture, encode_wav

__all__ = ['RecordingHandle', 'VoiceCapture', 'encode_wav']
