from .settings import DEFAULT_CONFIG_FILES, MonitorConfig

__all__ = ['DEFAULT_CONFIG_FILES', 'MonitorConfig']
