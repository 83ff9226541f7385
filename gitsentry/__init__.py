"""gitsentry: periodic GitHub scanning for leaked credentials of watched domains."""

from .monitor import Monitor
from .patterns import scan_for_domains, detect_credentials

__version__ = "0.1.0"

__all__ = ["Monitor", "scan_for_domains", "detect_credentials", "__version__"]
