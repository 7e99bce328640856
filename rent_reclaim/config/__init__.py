from rent_reclaim.config.settings import ConfigError, ReclaimConfig, Settings

__all__ = ['ConfigError', 'ReclaimConfig', 'Settings']
