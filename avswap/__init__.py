"""
avswap - Batch audio extraction and audio replacement for video files.

Scans a directory of videos and drives FFmpeg in one of two modes:
extract (video → standalone audio file) or merge (video + edited audio →
new video with the audio track replaced).
"""

__version__ = "0.1.0"
