from .ConfigRepository import ConfigRepository, config, set_config_repository

__all__ = ['ConfigRepository', 'config', 'set_config_repository']
