from .version import __version__ as __version__

__title__ = "RouteKit"
__description__ = "A declarative, specification-driven async HTTP API client."
__author__ = "RouteKit Developers"
__license__ = "Apache-2.0"
