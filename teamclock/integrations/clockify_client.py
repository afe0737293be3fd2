# teamclock/integrations/clockify_client.py

import logging
from datetime import datetime
from typing import Dict, List, Optional

import requests

from teamclock.errors import UpstreamUnavailable
from teamclock.models import ExternalUser, TimeEntry, UserGroup
from teamclock.utils.time_helpers import to_utc_iso

logger = logging.getLogger(__name__)


class ClockifyClient:
    """Client for the Clockify API (users, user groups and time entries)"""

    PAGE_SIZE = 100

    def __init__(self, api_key: str, base_url: str = "https://api.clockify.me/api/v1",
                 workspace_id: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "X-Api-Key": api_key,
            "Content-Type": "application/json",
        }
        self._workspace_id = workspace_id

    def get_workspaces(self) -> List[Dict]:
        response = self._get("/workspaces")
        response.raise_for_status()
        workspaces = response.json()
        if not isinstance(workspaces, list):
            raise UpstreamUnavailable("Invalid response format from Clockify API")
        return workspaces

    def set_active_workspace(self, workspace_id: str):
        self._workspace_id = workspace_id

    @property
    def workspace_id(self) -> str:
        """Configured workspace, or the first one on the account"""
        if not self._workspace_id:
            workspaces = self.get_workspaces()
            if not workspaces:
                raise UpstreamUnavailable("No workspaces found in Clockify account")
            self._workspace_id = workspaces[0].get('id')
            logger.info(f"Using Clockify workspace {self._workspace_id}")
        return self._workspace_id

    def list_users(self) -> List[ExternalUser]:
        """Fetch all workspace users with pagination; users without a name are skipped"""
        users = []
        page = 1

        while True:
            response = self._get(
                f"/workspaces/{self.workspace_id}/users",
                params={'page': page, 'page-size': self.PAGE_SIZE},
            )
            response.raise_for_status()
            data = response.json()

            if not isinstance(data, list):
                raise UpstreamUnavailable("Invalid response format from Clockify API")

            users.extend(ExternalUser.from_api(user) for user in data)

            # Fewer than a full page means this was the last one
            if len(data) < self.PAGE_SIZE:
                break
            page += 1

        named = [user for user in users if user.name]
        if len(named) < len(users):
            logger.debug(f"Skipped {len(users) - len(named)} Clockify users without a name")

        logger.info(f"Retrieved {len(named)} users from Clockify")
        return named

    def list_groups(self) -> List[UserGroup]:
        workspace_id = self.workspace_id
        response = self._get(f"/workspaces/{workspace_id}/user-groups")
        response.raise_for_status()
        groups = response.json()

        if not isinstance(groups, list):
            raise UpstreamUnavailable("Invalid response format from Clockify API")

        return [UserGroup.from_api(group, workspace_id) for group in groups]

    @staticmethod
    def group_for(user_id: str, groups: List[UserGroup]) -> Optional[UserGroup]:
        """First group that lists the user as a member"""
        for group in groups:
            if user_id in group.user_ids:
                return group
        return None

    def time_entries(self, user_id: str, start: datetime, end: datetime) -> List[TimeEntry]:
        """Time entries a user started within [start, end]"""
        response = self._get(
            f"/workspaces/{self.workspace_id}/user/{user_id}/time-entries",
            params={
                'start': to_utc_iso(start),
                'end': to_utc_iso(end),
                'page-size': 1000,
            },
        )
        response.raise_for_status()
        entries = response.json()

        if not isinstance(entries, list):
            raise UpstreamUnavailable("Invalid response format from Clockify API")

        return [TimeEntry.from_clockify(entry) for entry in entries]

    def active_entry(self, user_id: str) -> Optional[TimeEntry]:
        """The user's running timer, None when there is none"""
        response = self._get(
            f"/workspaces/{self.workspace_id}/user/{user_id}/time-entries",
            params={'in-progress': 'true'},
        )

        # Clockify answers 404 for users without a running timer
        if response.status_code == 404:
            return None
        response.raise_for_status()

        entries = response.json()
        if not entries:
            return None
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            raise UpstreamUnavailable("Invalid response format from Clockify API")

        return TimeEntry.from_clockify(entries[0])

    def _get(self, path: str, params: Optional[Dict] = None) -> requests.Response:
        return self.session.get(
            f"{self.base_url}{path}",
            headers=self.headers,
            params=params,
            timeout=self.timeout,
        )
