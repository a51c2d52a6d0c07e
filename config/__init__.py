"""Configuration package for chef-server-backup.

Constants live in `config.settings`; they are re-exported here so both
`from config import COMPONENT_TYPES` and `from config.settings import ...`
work. Keep new settings in `settings.py` only.
"""
from .settings import *  # noqa: F401,F403
from .settings import __all__  # noqa: F401
