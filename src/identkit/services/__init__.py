"""Service layer — codec, resolvers and the stream reader.

Every public operation returns a ResolutionResult. Services may import from
domain and infrastructure; they must never import from config.logging.
"""
