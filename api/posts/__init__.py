"""
Posts written by users, optionally attached to a biome.
"""
