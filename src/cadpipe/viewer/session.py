"""
Interactive viewer sessions.

The viewer is a uvicorn server running on its own thread, serving the
mesh to a Three.js page in the browser. Failure to start the server is
reported to the caller; once it is up, the caller may wait for the session
to end (server exit or Ctrl+C).
"""

from typing import Optional
import logging
import threading
import time
import webbrowser

import trimesh
import uvicorn
from rich.console import Console

from cadpipe.viewer.app import create_viewer_app

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class ViewerError(Exception):
    """The viewer could not be started."""


class ViewerSession:
    """A running viewer server."""

    def __init__(self, server: uvicorn.Server, thread: threading.Thread, url: str):
        self.server = server
        self.thread = thread
        self.url = url

    @property
    def is_running(self) -> bool:
        return self.thread.is_alive()

    def wait(self) -> None:
        """Block until the server exits. Ctrl+C stops the server."""
        try:
            while self.thread.is_alive():
                self.thread.join(timeout=0.5)
        except KeyboardInterrupt:
            logger.info("Viewer interrupted, shutting down")
            self.close()

    def close(self, timeout: float = 5.0) -> None:
        """Ask the server to exit and wait for its thread."""
        self.server.should_exit = True
        self.thread.join(timeout=timeout)


def spawn_viewer(
    mesh: trimesh.Trimesh,
    name: str = "model",
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    start_timeout: float = 10.0,
) -> ViewerSession:
    """
    Start a viewer server for a mesh on a dedicated thread.

    Args:
        mesh: Mesh to display
        name: Model name shown in the page
        host: Interface to bind
        port: Server port
        start_timeout: Seconds to wait for the server to come up

    Returns:
        The running ViewerSession

    Raises:
        ViewerError: If the mesh is empty or the server does not start
    """
    if len(mesh.faces) == 0:
        raise ViewerError("Nothing to display: the mesh has no triangles")

    app = create_viewer_app(mesh, name=name)
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)

    exit_codes = []

    def serve():
        # uvicorn exits through sys.exit when it can't bind
        try:
            server.run()
        except SystemExit as e:
            exit_codes.append(e.code)

    thread = threading.Thread(target=serve, name="cadpipe-viewer", daemon=True)
    thread.start()

    deadline = time.monotonic() + start_timeout
    while not server.started:
        if not thread.is_alive():
            detail = f" (exit code {exit_codes[0]})" if exit_codes else ""
            raise ViewerError(f"Viewer server failed to start on {host}:{port}{detail}")
        if time.monotonic() >= deadline:
            server.should_exit = True
            thread.join(timeout=5.0)
            raise ViewerError(f"Viewer server did not start within {start_timeout:g}s")
        time.sleep(0.05)

    url = f"http://{host}:{port}"
    logger.info("Viewer running at %s", url)

    return ViewerSession(server, thread, url)


class BrowserViewer:
    """
    Displays meshes in the browser.

    Attributes:
        host: Interface the server binds to
        port: Server port
        open_browser: Open the page in the default browser
        start_timeout: Seconds to wait for the server to come up
        console: Console for user-facing messages
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        open_browser: bool = True,
        start_timeout: float = 10.0,
        console: Optional[Console] = None,
    ):
        self.host = host
        self.port = port
        self.open_browser = open_browser
        self.start_timeout = start_timeout
        self.console = console or Console()

    def spawn_and_display(self, mesh: trimesh.Trimesh, name: Optional[str] = None) -> None:
        """
        Show a mesh and block until the viewer session ends.

        Raises:
            ViewerError: If the viewer can't be started
        """
        session = spawn_viewer(
            mesh,
            name=name or "model",
            host=self.host,
            port=self.port,
            start_timeout=self.start_timeout,
        )

        if self.open_browser:
            webbrowser.open(session.url)

        self.console.print(f"Viewing model at [cyan]{session.url}[/cyan] (press Ctrl+C to stop)")
        session.wait()
