"""depotscan — sorted file listings from Perforce tagged output.

Streams ``p4 -z tag`` output through a concurrent parser with a strict
layered architecture.
"""

from depotscan.version import __version__

__all__: list[str] = ["__version__"]
