from metaconsole.core.config import settings
from metaconsole.db.analytical_session import AnalyticalSession

analyticalSession = AnalyticalSession(
    databasePath=settings.analyticalDatabasePath,
    token=settings.motherduckToken,
    database=settings.motherduckDatabase,
    schema=settings.motherduckSchema,
)

def getAnalyticalSession() -> AnalyticalSession:
    return analyticalSession
