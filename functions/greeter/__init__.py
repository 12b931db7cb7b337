"""
Greeter settings service.

A single-key settings store (the greeting suffix) behind a small request
router, served either as a serverless function (see ``functions/main.py``)
or as a FastAPI app for local development.
"""
