"""Retrieval quality evaluations for FocusEdu.

These evals run the TF-IDF retriever against the bundled knowledge base and
grade the results with deterministic code graders.
"""
