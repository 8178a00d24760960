"""Icon-to-role assignment board.

The board is the in-progress draft of the main survey: a fixed list of role
slots and a shuffled pool of icons. Icons are placed by dropping them on a
slot (desktop drag and drop) or by selecting an icon and tapping a slot
(mobile). Both paths share one move rule:

* a slot holds at most one icon;
* an icon sits in at most one slot, so placing an icon that is already
  assigned elsewhere clears its previous slot first;
* an icon displaced from the target slot goes back to the pool.

Every effective change pushes a snapshot of the whole slot list onto
`history`, which `undo()` pops. The board is a pydantic model so that it can
be stored as JSON between requests.
"""
import random
from pydantic import BaseModel, Field

from src.app.core.errors import UnknownIconError
from src.credit.catalog import CREDIT_ROLES, ICON_SET, CreditRole, IconItem, shuffled_icons


class RoleSlot(BaseModel):
    id: int
    title: str
    description: str = ""
    assigned_icon: str | None = None


class RoleBoard(BaseModel):
    roles: list[RoleSlot]
    available_icons: list[IconItem]
    selected_icon: str | None = None
    history: list[list[RoleSlot]] = Field(default_factory=list)

    @classmethod
    def new(
        cls,
        roles: list[CreditRole] = CREDIT_ROLES,
        icons: list[IconItem] = ICON_SET,
        rng: random.Random | None = None,
    ) -> "RoleBoard":
        return cls(
            roles=[RoleSlot(id=r.id, title=r.title, description=r.description) for r in roles],
            available_icons=shuffled_icons(icons, rng),
        )

    # -- derived state --------------------------------------------------

    @property
    def icon_names(self) -> set[str]:
        return {icon.name for icon in self.available_icons}

    @property
    def assigned_count(self) -> int:
        return sum(1 for slot in self.roles if slot.assigned_icon)

    @property
    def progress(self) -> float:
        if not self.roles:
            return 0.0
        return self.assigned_count / len(self.roles) * 100

    @property
    def is_complete(self) -> bool:
        return self.assigned_count == len(self.roles)

    @property
    def current_icon(self) -> IconItem | None:
        """First icon of the pool that is not placed yet."""
        assigned = {slot.assigned_icon for slot in self.roles if slot.assigned_icon}
        return next((icon for icon in self.available_icons if icon.name not in assigned), None)

    @property
    def current_icon_index(self) -> int:
        icon = self.current_icon
        return self.available_icons.index(icon) if icon else len(self.available_icons)

    def slot_of(self, icon: str) -> RoleSlot | None:
        return next((slot for slot in self.roles if slot.assigned_icon == icon), None)

    def to_responses(self) -> list[dict]:
        """Assigned slots in role order, numbered from 0."""
        assigned = [slot for slot in self.roles if slot.assigned_icon]
        return [
            {"role_title": slot.title, "assigned_icon": slot.assigned_icon, "response_order": index}
            for index, slot in enumerate(assigned)
        ]

    # -- mutations -------------------------------------------------------

    def _require_icon(self, icon: str) -> None:
        if icon not in self.icon_names:
            raise UnknownIconError(icon)

    def _index(self, role_id: int) -> int | None:
        return next((i for i, slot in enumerate(self.roles) if slot.id == role_id), None)

    def _snapshot(self) -> list[RoleSlot]:
        return [slot.model_copy() for slot in self.roles]

    def drop(self, role_id: int, icon: str) -> bool:
        """Place `icon` on the slot `role_id`. Returns whether the board changed."""
        self._require_icon(icon)
        target = self._index(role_id)
        if target is None or self.roles[target].assigned_icon == icon:
            return False

        updated = self._snapshot()
        for slot in updated:
            if slot.assigned_icon == icon:
                slot.assigned_icon = None
        updated[target].assigned_icon = icon

        self.history.append(self._snapshot())
        self.roles = updated
        return True

    def select_icon(self, icon: str) -> str | None:
        """Toggle the tap-mode selection and return the new selection."""
        self._require_icon(icon)
        self.selected_icon = None if self.selected_icon == icon else icon
        return self.selected_icon

    def tap(self, role_id: int) -> bool:
        if self.selected_icon is None:
            return False
        changed = self.drop(role_id, self.selected_icon)
        if changed:
            self.selected_icon = None
        return changed

    def undo(self) -> bool:
        if not self.history:
            return False
        self.roles = self.history.pop()
        return True

    def reset(self, rng: random.Random | None = None) -> None:
        self.roles = [slot.model_copy(update={"assigned_icon": None}) for slot in self.roles]
        self.available_icons = shuffled_icons(self.available_icons, rng)
        self.selected_icon = None
        self.history = []
