"""SocialPilot: AI-drafted social posts with approval and multi-platform publishing."""

__version__ = "1.0.0"
