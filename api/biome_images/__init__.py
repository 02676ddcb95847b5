"""
Images attached to biomes.
"""
