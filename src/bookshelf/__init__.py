"""Bookshelf: a book catalog served over GraphQL and backed by MongoDB.

The package is split by concern:
- api: FastAPI application and the GraphQL gateway
- entities: the Book record, its document mapping and repository
- core: error taxonomy, security helpers and the MongoDB client service
- client: GraphQL gateway client and the client-side synchronization store
- runtime: configuration loading and the application context
"""

__version__ = "0.1.0"
