"""FastAPI web layer for VidForge"""
