"""Service layer for FocusEdu.

Services wrap the external collaborators (YouTube, OpenAI, NewsData) used by
the API endpoints.
"""
