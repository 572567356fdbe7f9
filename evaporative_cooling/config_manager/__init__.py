"""
Configuration Manager Module
============================

Responsibility:
- Centralized loading and validation of JSON configuration files.
- Enforcement of schema constraints and logical rules.
- Conversion into the frozen ECConfiguration used by the controller.
"""

from .config_manager import ConfigurationManager
from .ec_configuration import ECConfiguration

__all__ = ['ConfigurationManager', 'ECConfiguration']
