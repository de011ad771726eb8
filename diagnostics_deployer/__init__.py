"""
Provision Cosmos DB diagnostics streaming to Azure Event Hubs, with
guaranteed cleanup of everything that was created.
"""

__version__ = "0.1.0"
