"""
__init__

Admin console entry point.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from .conf import AdminUISettings, configure, current_settings
from .core.crud import ModelAdmin, ModelConfig
from .core.handlers import RenderDirective
from .core.site import AdminSite

__version__ = "0.1.0"

# The End
