from sequencer.managers.config_manager import ConfigManager

__all__ = ['ConfigManager']
