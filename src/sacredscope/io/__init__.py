"""
File input and session export.

Import ``sacredscope.io.audio_source`` directly; it pulls in librosa.
"""
