"""
The VIEW layer holds presentation helpers that read the basin map.
"""
