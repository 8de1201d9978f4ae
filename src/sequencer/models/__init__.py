"""
Data models: enums, errors, keyframes, document protocols, settings
"""
