"""
Core business logic for the blog.

This module is framework-agnostic - it doesn't import FastAPI, boto3,
pymongo or any infrastructure concerns. Uploads depend only on the
AssetWriter protocol, and site metadata only on plain documents.
"""
