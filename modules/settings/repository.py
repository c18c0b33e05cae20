from typing import Dict

from modules.settings.models import LOOKUP_TABLES
from repository import BaseRepository


class LookupRepository(BaseRepository):
    """One repository class serves every lookup table; the model is picked per instance."""

    def __init__(self, session, model, label: str):
        super().__init__(session)
        self.model = model
        self.label = label
        self.order_by = model.name.asc()

    def find_by_name(self, name: str):
        return self.query.filter_by(name=name).first()


def lookup_repositories(session) -> Dict[str, LookupRepository]:
    """Slug -> repository for every lookup table."""
    return {kind: LookupRepository(session, model, label) for kind, (model, label) in LOOKUP_TABLES.items()}
