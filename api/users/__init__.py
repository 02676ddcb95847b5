"""
Users: accounts, profile images and their expanded posts/comments.
"""
