"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, factory de sessions, client de
recherche) et expose un singleton `container` utilisé par le reste de l'application.
Les services métier sont construits à la demande à partir de `session_factory`, ce qui
permet aux tests de substituer la base.
"""

from curate.core.settings import get_settings
from curate.infra.repo.db import get_engine, get_session_factory
from curate.infra.search.exa_client import ExaSearchClient


class Container:
    def __init__(self):
        self.settings = get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL, echo=self.settings.DB_ECHO)
        self.session_factory = get_session_factory(self.engine)
        self.search_client = ExaSearchClient(
            api_key=self.settings.EXA_API_KEY,
            base_url=self.settings.EXA_API_URL,
            timeout=self.settings.EXA_TIMEOUT_SECONDS,
        )
        self.storage_backend = self.engine.dialect.name


container = Container()
