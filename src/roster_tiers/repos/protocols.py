from typing import Protocol

from roster_tiers.domain.errors import StoreError
from roster_tiers.domain.member import MemberRecord
from roster_tiers.domain.result import Result


class MemberRepo(Protocol):
    def fetch_active_members(self) -> Result[list[MemberRecord], StoreError]: ...

    def update_tier_score(self, member_id: str, score: int) -> Result[None, StoreError]: ...
