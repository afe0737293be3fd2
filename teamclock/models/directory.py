"""Directory source models (Clockify users and user groups)"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

class UserStatus(Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'UserStatus':
        """Anything other than ACTIVE counts as inactive"""
        return cls.ACTIVE if value == cls.ACTIVE.value else cls.INACTIVE

@dataclass
class ExternalUser:
    """A user as reported by the directory source"""
    id: str
    name: str
    email: str
    status: UserStatus = UserStatus.INACTIVE
    active_workspace: str = ''
    default_workspace: str = ''
    profile_picture: str = ''
    group: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @classmethod
    def from_api(cls, data: Dict) -> 'ExternalUser':
        return cls(
            id=data.get('id') or '',
            name=data.get('name') or '',
            email=data.get('email') or '',
            status=UserStatus.parse(data.get('status') or 'INACTIVE'),
            active_workspace=data.get('activeWorkspace') or '',
            default_workspace=data.get('defaultWorkspace') or '',
            profile_picture=data.get('profilePicture') or '',
        )

@dataclass
class UserGroup:
    """A directory user group and its members"""
    id: str
    name: str
    workspace_id: str = ''
    user_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict, workspace_id: str = '') -> 'UserGroup':
        user_ids = data.get('userIds')
        return cls(
            id=data.get('id') or '',
            name=data.get('name') or 'Unnamed Group',
            workspace_id=data.get('workspaceId') or workspace_id or '',
            user_ids=list(user_ids) if isinstance(user_ids, list) else [],
        )
