import logging
from typing import Any, Dict, Optional

import requests

from .visitor_identity import VisitorIdentity

ADMIN_PATH_PREFIX = "/admin"


class AnalyticsTracker:
    """
    Posts visitor events to ``POST /api/analytics``.

    Delivery is at most once: failures are logged and the event is dropped,
    so tracking never breaks the page that triggered it.
    """

    def __init__(
        self,
        api_url: str,
        identity: VisitorIdentity,
        user_agent: str,
        user_id: Optional[str] = None,
        ip: str = "127.0.0.1",
        timeout: float = 5,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.identity = identity
        self.user_agent = user_agent
        self.user_id = user_id
        self.ip = ip
        self.timeout = timeout
        self.session = session or requests.Session()

    def track_page_view(self, path: str, time_spent: int = 0, referrer: Optional[str] = None) -> bool:
        if path.startswith(ADMIN_PATH_PREFIX):
            logging.debug(f"Skipping admin path {path}")
            return False
        return self._send("pageView", path, timeSpent=time_spent, referrer=referrer)

    def track_contact_submission(self) -> bool:
        return self._send("contactSubmission", "/contact")

    def track_resume_download(self) -> bool:
        return self._send("resumeDownload", "/resume")

    def track_project_view(self, project_id: str) -> bool:
        return self._send(
            "projectView", f"/projects/{project_id}", metadata={"projectId": project_id}
        )

    def track_skill_view(self, skill_id: str) -> bool:
        return self._send("skillView", "/skills", metadata={"skillId": skill_id})

    def _send(self, event_type: str, path: str, **fields: Any) -> bool:
        payload: Dict[str, Any] = {
            "type": event_type,
            "visitorId": self.identity.get_visitor_id(),
            "userId": self.user_id,
            "ip": self.ip,
            "userAgent": self.user_agent,
            "path": path,
        }
        payload.update({key: value for key, value in fields.items() if value is not None})

        try:
            response = self.session.post(self.api_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logging.warning(f"Dropped {event_type} event for {path}: {e}")
            return False
        return True
