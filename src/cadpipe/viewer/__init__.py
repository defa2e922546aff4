"""Interactive browser viewer for triangulated models."""

from cadpipe.viewer.session import BrowserViewer, ViewerError, ViewerSession, spawn_viewer

__all__ = ["BrowserViewer", "ViewerError", "ViewerSession", "spawn_viewer"]
