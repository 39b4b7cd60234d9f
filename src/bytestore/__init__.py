"""bytestore: filesystem-backed object storage grouped into containers."""

__version__ = "0.1.0"
