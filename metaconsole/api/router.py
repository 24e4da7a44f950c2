from fastapi import APIRouter
from metaconsole.api.v1 import (
    config_router, namespace_router, entity_router, grid_router, staging_router,
    glossary_router, rules_router, model_router, connection_router,
)

apiRouter = APIRouter()

apiRouter.include_router(config_router.router, tags=["Configuration"])
apiRouter.include_router(namespace_router.router)
apiRouter.include_router(entity_router.router)
apiRouter.include_router(grid_router.router)
apiRouter.include_router(staging_router.router)
apiRouter.include_router(glossary_router.router)
apiRouter.include_router(rules_router.router)
apiRouter.include_router(model_router.router)
apiRouter.include_router(connection_router.router)
