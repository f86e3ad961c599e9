"""VidForge: AI video generation demo back end"""

__version__ = "1.0.0"
