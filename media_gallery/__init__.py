"""Event media gallery backend: upload and deletion pipelines over two stores."""

__version__ = "1.0.0"
