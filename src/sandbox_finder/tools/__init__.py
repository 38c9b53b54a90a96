"""
Search tools for the Sandbox Finder.

This module contains the building blocks a search is composed of: query
sanitization, the sandbox policy, directory walking and relevance scoring.
"""
