"""
RepoVibe - browse GitHub repositories and get AI guidance on their issues.
"""

__version__ = "0.1.0"
