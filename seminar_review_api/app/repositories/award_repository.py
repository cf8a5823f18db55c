from typing import List

from ..schemas import AWARD
from ..schemas.award import Award
from ..schemas.enums import AwardType
from .base import BaseRepository


class AwardRepository(BaseRepository[Award]):
    entity_type = AWARD
    model = Award

    def find_by_type(self, award_type: AwardType) -> List[Award]:
        return self.find_by("type", award_type)

    def delete_all(self) -> int:
        return self.store.delete_all(self.entity_type)

    def replace_all(self, awards: List[Award]) -> List[Award]:
        """Discard the stored award set and store ``awards`` in its place."""
        self.delete_all()
        return [self.save(award) for award in awards]
