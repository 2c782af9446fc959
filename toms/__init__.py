"""Travel back-office document engine: pricing, vouchers and printable documents."""
from .config import VERSION

__version__ = VERSION
