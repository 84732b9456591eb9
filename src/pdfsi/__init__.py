"""pdfsi package metadata."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("pdf-secret-inspector")
except PackageNotFoundError:
    __version__ = "1.0.0"
