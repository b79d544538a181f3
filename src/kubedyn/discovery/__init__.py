"""
Turns the discovery documents reported by the API server into #ApiResource descriptors and their details.
"""
