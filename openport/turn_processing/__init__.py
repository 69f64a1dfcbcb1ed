"""Input validation for run transitions.

Every submitted action goes through the same pipeline whether it comes from the
HTTP API or from a direct controller call, so rejections show up consistently
in the logs.
"""
