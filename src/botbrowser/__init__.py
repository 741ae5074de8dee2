"""botbrowser -- Game client browser with a local control socket.

This package hosts the game client in a Chromium window and exposes a
Unix socket that lets an external bot process send keystrokes, typed
text and page refreshes to that window.
"""

__version__ = "0.1.0"
