"""
LeetCode → GitHub Sync

Publishes the accepted solutions and problem statements of a LeetCode
account as files in a GitHub repository.
"""

__version__ = "1.0.0"
