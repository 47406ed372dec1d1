"""Infrastructure layer — filesystem, registry, link graph, site wiring.

This layer depends on stdlib, the domain layer and third-party libs
(NetworkX, pluggy). It must never import from services, commands, or output.
"""
