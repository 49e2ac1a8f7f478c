"""h2c — turn a raw HTTP request into an equivalent curl command line.

Built as a pure parse → synthesize pipeline behind a thin CLI layer.
"""

from h2c.version import __version__

__all__: list[str] = ["__version__"]
