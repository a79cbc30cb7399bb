"""Video Merge API - Core application modules.

Provides:
- Configuration (MergeConfig) and error taxonomy
- Temporary storage utilities: paths, atomic_io
- Ingress validation, ffmpeg merge executor, GitHub publisher
"""

__version__ = "0.1.0"
