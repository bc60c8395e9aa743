from typing import Optional

from dinewithus.models.booking import CamelModel


class User(CamelModel):
    id: Optional[str] = None # current-user responses carry no id
    email: str
    name: Optional[str] = None
    role: Optional[str] = None # guest / host / admin, None until role selection
    phone: Optional[str] = None
    needs_profile_completion: bool = False
    needs_role_selection: bool = False

    @property
    def has_phone(self) -> bool:
        return bool(self.phone and self.phone.strip())
