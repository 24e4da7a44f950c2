from metaconsole.services.graphql_client import CatalogGraphQLClient, graphqlClient
from metaconsole.services.rest_client import CatalogRestClient, restClient

class CatalogClients:
    """Read path (GraphQL) and write path (REST) of the catalog, handed to crud modules together."""

    def __init__(self, graphql: CatalogGraphQLClient, rest: CatalogRestClient):
        self.graphql = graphql
        self.rest = rest

    async def aclose(self) -> None:
        await self.graphql.aclose()
        await self.rest.aclose()

catalogClients = CatalogClients(graphql=graphqlClient, rest=restClient)

def getCatalogClients() -> CatalogClients:
    return catalogClients
