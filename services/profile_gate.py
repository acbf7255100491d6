# services/profile_gate.py
import enum
import logging
from typing import List, Optional

from pydantic import BaseModel

from crud.profile import ProfileCRUD
from models.profile import Profile, RoleEnum
from services.screen import Screen
from utils.errors import StoreError, ValidationFailed

logger = logging.getLogger(__name__)

class GateState(str, enum.Enum):
    unknown = "unknown"
    incomplete = "incomplete"
    complete = "complete"

def is_profile_complete(profile: Optional[Profile]) -> bool:
    """Full name (after trimming) and role must both be set"""
    if profile is None:
        return False
    return bool((profile.full_name or "").strip() and profile.role)

def compute_gate_state(profile: Optional[Profile], loaded: bool = True) -> GateState:
    if not loaded:
        return GateState.unknown
    return GateState.complete if is_profile_complete(profile) else GateState.incomplete


class CompletionForm(BaseModel):
    full_name: str = ""
    role: Optional[str] = None

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.full_name.strip():
            missing.append("full_name")
        if self.role not in [r.value for r in RoleEnum]:
            missing.append("role")
        return missing

    @property
    def can_submit(self) -> bool:
        return not self.missing_fields()


class ProfileGate(Screen):
    """Blocks the dashboard until the profile has a name and a role.

    The gate starts ``unknown`` and only moves forward once the profile has
    been read from the store. A failed read leaves it blocking; a failed save
    leaves the form in place so the user can try again.
    """

    def __init__(self, profiles: ProfileCRUD, user_id: str):
        super().__init__()
        self.profiles = profiles
        self.user_id = user_id
        self.profile: Optional[Profile] = None
        self.state = GateState.unknown
        self.form = CompletionForm()
        self.saving = False

    @property
    def released(self) -> bool:
        return self.state == GateState.complete

    def _set_state(self, state: GateState) -> None:
        if state != self.state:
            logger.debug("Profile gate for %s: %s -> %s", self.user_id, self.state.value, state.value)
        self.state = state

    async def load(self) -> GateState:
        try:
            profile = await self.profiles.get_profile(self.user_id)
        except StoreError:
            logger.exception("Error checking profile completion for %s", self.user_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
                self._set_state(GateState.incomplete)
            return self.state

        if self.closed:
            return self.state

        self.profile = profile
        self.load_failed = False
        if profile is not None:
            # Seed the form with whatever is already stored
            self.form = CompletionForm(full_name=profile.full_name or "", role=profile.role)
        self._set_state(compute_gate_state(profile))
        return self.state

    async def submit(self, full_name: str, role: Optional[str]) -> GateState:
        """Save the completion form.

        Only an ``incomplete`` gate writes. A gate that has not been read yet
        (or whose last read failed) reads first; an already complete profile
        is returned as is, so the role can't be changed here.
        """
        if self.state == GateState.unknown or self.load_failed:
            await self.load()
        if self.released:
            return self.state

        self.form = CompletionForm(full_name=full_name, role=role)
        if self.state != GateState.incomplete or self.load_failed:
            return self.state

        missing = self.form.missing_fields()
        if missing:
            self.notify("profile_incomplete")
            raise ValidationFailed(missing)

        self.saving = True
        try:
            updated = await self.profiles.update_profile(
                self.user_id,
                {"full_name": self.form.full_name.strip(), "role": self.form.role}
            )
        except StoreError:
            logger.exception("Error updating profile %s", self.user_id)
            self.notify("profile_complete_failed")
            return self.state
        finally:
            self.saving = False

        if updated is None:
            self.notify("profile_complete_failed")
            return self.state

        # Recompute from the stored record, not from what was submitted
        await self.load()
        if self.released:
            self.notify("profile_completed")
        return self.state

    def render(self) -> dict:
        payload = {
            "state": self.state.value,
            "notifications": [n.model_dump() for n in self.notifications],
        }
        if self.state == GateState.unknown:
            payload["loading"] = True
        elif self.state == GateState.incomplete:
            payload["form"] = {
                "full_name": self.form.full_name,
                "role": self.form.role,
                "roles": [r.value for r in RoleEnum],
                "can_submit": self.form.can_submit and not self.saving,
            }
        return payload
