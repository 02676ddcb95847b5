"""
Biomes and their descriptive texts.
"""
