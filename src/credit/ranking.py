"""Tie-breaker ranking: one step per role, up to four candidate icons ranked in tap order."""
from pydantic import BaseModel, Field

from src.app.core.errors import RankingIncompleteError, UnknownIconError
from src.credit.catalog import MAX_RANKED_ICONS, TIE_BREAKER_ROLES, TieBreakerRole


class RankingSession(BaseModel):
    current_step: int = 0
    rankings: dict[str, list[str]] = Field(default_factory=dict)
    finished: bool = False

    @property
    def role(self) -> TieBreakerRole:
        return TIE_BREAKER_ROLES[self.current_step]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(TIE_BREAKER_ROLES) - 1

    @property
    def current_ranked(self) -> list[str]:
        return self.rankings.get(self.role.title, [])

    def toggle(self, icon: str) -> list[str]:
        """Rank `icon` next, or drop it from the ranking when already ranked."""
        role = self.role
        if icon not in role.candidates:
            raise UnknownIconError(icon)
        current = list(self.rankings.get(role.title, []))
        if icon in current:
            current.remove(icon)
        elif len(current) < MAX_RANKED_ICONS:
            current.append(icon)
        self.rankings[role.title] = current
        return current

    def next(self) -> bool:
        """Advance to the next role; returns True once the last role is ranked."""
        if not self.current_ranked:
            raise RankingIncompleteError(self.role.title)
        if self.is_last_step:
            self.finished = True
            return True
        self.current_step += 1
        return False

    def rows(self) -> list[dict]:
        return [
            {"role_title": title, "icon_name": icon, "rank_position": index + 1}
            for title, icons in self.rankings.items()
            for index, icon in enumerate(icons)
        ]
