"""thumbserve - on-demand image resizing server."""

__version__ = "0.1.0"
