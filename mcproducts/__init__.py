"""Products service: configuration, translations, common-service client and gRPC server."""

__version__ = "0.1.11"