"""
kubedyn resolves Kubernetes API resources, whether compiled-in or discovered at runtime, into descriptors and
builds the REST requests for operations on them.
"""

__version__ = "0.1.0"
